from __future__ import annotations

import piexif
import pytest

from exiframe.services.errors import ErrorKind, MalformedMetadataError
from exiframe.services.exif_fields import FIELD_TABLE, FIELDS_BY_NAME
from exiframe.services.tag_locator import ExifTree, TagEntry, format_first, locate_field, locate_fields


def empty_tree() -> ExifTree:
	return ExifTree({"0th": {}, "Exif": {}, "GPS": {}, "Interop": {}, "1st": {}, "thumbnail": None})


def test_find_ifd_resolves_known_paths():
	tree = ExifTree({"0th": {0x010F: b"Canon"}, "Exif": {}, "GPS": {}})
	assert tree.find_ifd("IFD").tags == {0x010F: b"Canon"}
	assert tree.find_ifd("IFD/Exif").key == "Exif"
	assert tree.find_ifd("IFD/GPSInfo").key == "GPS"


@pytest.mark.parametrize("path", ["IFD/Bogus", "IFD/Exif/Iop"])
def test_find_ifd_unknown_or_missing_path_is_fatal(path):
	tree = ExifTree({"0th": {}, "Exif": {}})
	with pytest.raises(MalformedMetadataError) as exc:
		tree.find_ifd(path)
	assert exc.value.stage == "resolve"


def test_find_tags_searches_only_the_given_ifd():
	# Make placed in the Exif IFD must not be found under IFD
	tree = ExifTree({"0th": {}, "Exif": {0x010F: b"Canon"}, "GPS": {}})
	assert tree.find_tags(tree.find_ifd("IFD"), 0x010F) == []
	assert locate_field(tree, FIELDS_BY_NAME["Make"]) is None


def test_find_tags_carries_piexif_type():
	tree = ExifTree({"0th": {}, "Exif": {piexif.ExifIFD.FNumber: (18, 10)}, "GPS": {}})
	(entry,) = tree.find_tags(tree.find_ifd("IFD/Exif"), piexif.ExifIFD.FNumber)
	assert entry.type == piexif.TYPES.Rational


@pytest.mark.parametrize(
	"value, tag_type, expected",
	[
		(b"Canon\x00", piexif.TYPES.Ascii, "Canon"),
		(b"EOS R5  ", piexif.TYPES.Ascii, "EOS R5  "),
		(b" Canon\x00\x00\x00", piexif.TYPES.Ascii, " Canon"),
		(100, piexif.TYPES.Short, "100"),
		((18, 10), piexif.TYPES.Rational, "18/10"),
		(((1, 250), (1, 1)), piexif.TYPES.Rational, "1/250"),
		((100, 200), piexif.TYPES.Short, "100"),
		("2022:01:01 12:00:00", None, "2022:01:01 12:00:00"),
	],
)
def test_format_first(value, tag_type, expected):
	assert format_first(TagEntry(0x0001, value, tag_type)) == expected


@pytest.mark.parametrize("value", [1.5, None, (), [1, 2]])
def test_format_first_rejects_unsupported_values(value):
	with pytest.raises(ValueError):
		format_first(TagEntry(0x0001, value, None))


def test_undecodable_value_is_fatal_with_field_name():
	tree = ExifTree({"0th": {piexif.ImageIFD.Model: b"\xff\xfe\xfa"}, "Exif": {}, "GPS": {}})
	with pytest.raises(MalformedMetadataError) as exc:
		locate_field(tree, FIELDS_BY_NAME["Model"])
	assert exc.value.stage == "decode"
	assert exc.value.field == "Model"


def test_all_fields_absent_is_not_fatal():
	values, issues = locate_fields(empty_tree())
	assert values == {}
	assert len(issues) == len(FIELD_TABLE)
	assert {i.kind for i in issues} == {ErrorKind.ABSENT_TAG}


def test_missing_exif_ifd_reports_field():
	tree = ExifTree({"0th": {piexif.ImageIFD.Make: b"Canon"}})
	with pytest.raises(MalformedMetadataError) as exc:
		locate_fields(tree)
	assert exc.value.stage == "resolve"
	assert FIELDS_BY_NAME[exc.value.field].ifd_path == "IFD/Exif"
