from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import piexif
from loguru import logger

from exiframe.services.errors import ErrorKind, FieldIssue, MalformedMetadataError
from exiframe.services.exif_fields import FIELD_TABLE, FieldDescriptor

# slash paths -> piexif IFD keys
IFD_KEYS: Dict[str, str] = {
	"IFD": "0th",
	"IFD/Exif": "Exif",
	"IFD/GPSInfo": "GPS",
	"IFD/Exif/Iop": "Interop",
	"IFD1": "1st",
}

_RATIONAL_TYPES = (piexif.TYPES.Rational, piexif.TYPES.SRational)


@dataclass(frozen=True)
class TagEntry:
	tag_id: int
	value: Any
	type: Optional[int] = None


@dataclass(frozen=True)
class IfdNode:
	path: str
	key: str
	tags: Mapping[int, Any]


class ExifTree:
	"""Read-only view over the dict returned by ``piexif.load``."""

	def __init__(self, exif_dict: Mapping[str, Any]) -> None:
		self._data = exif_dict

	def find_ifd(self, path: str) -> IfdNode:
		key = IFD_KEYS.get(path)
		if key is None:
			raise MalformedMetadataError(f"unknown IFD path {path!r}", stage="resolve")
		node = self._data.get(key)
		if not isinstance(node, Mapping):
			raise MalformedMetadataError(f"IFD path {path!r} not found", stage="resolve")
		return IfdNode(path=path, key=key, tags=node)

	def find_tags(self, ifd: IfdNode, tag_id: int) -> List[TagEntry]:
		# piexif keys tags by id, so there is at most one match per IFD
		if tag_id not in ifd.tags:
			return []
		tag_type = piexif.TAGS.get(ifd.key, {}).get(tag_id, {}).get("type")
		return [TagEntry(tag_id, ifd.tags[tag_id], tag_type)]


def _format_rational(x: Any) -> str:
	if isinstance(x, tuple) and len(x) == 2 and all(isinstance(p, int) for p in x):
		num, den = x
		return f"{num}/{den}"
	raise ValueError(f"not a rational: {x!r}")


def _bytes_to_str(v: bytes) -> str:
	return v.decode("utf-8").rstrip("\x00")


def format_first(entry: TagEntry) -> str:
	"""Decode the first value of ``entry`` into its display string."""
	v = entry.value
	if isinstance(v, bytes):
		return _bytes_to_str(v)
	if isinstance(v, str):
		return v.rstrip("\x00")
	if isinstance(v, bool):
		raise ValueError(f"unsupported value type {type(v).__name__}")
	if isinstance(v, int):
		return str(v)
	if isinstance(v, tuple) and v:
		if entry.type in _RATIONAL_TYPES:
			first = v[0] if isinstance(v[0], tuple) else v
			return _format_rational(first)
		return format_first(TagEntry(entry.tag_id, v[0], entry.type))
	raise ValueError(f"unsupported value type {type(v).__name__}")


def locate_field(tree: ExifTree, descriptor: FieldDescriptor) -> Optional[str]:
	"""Return the first decoded value for ``descriptor``, or None when absent."""
	try:
		ifd = tree.find_ifd(descriptor.ifd_path)
	except MalformedMetadataError as e:
		e.field = descriptor.name
		raise
	results = tree.find_tags(ifd, descriptor.tag_id)
	if not results:
		return None
	try:
		return format_first(results[0])
	except (ValueError, UnicodeDecodeError) as e:
		raise MalformedMetadataError(
			f"cannot decode tag 0x{descriptor.tag_id:04x}: {e}",
			stage="decode",
			field=descriptor.name,
		) from e


def locate_fields(
	tree: ExifTree,
	table: Iterable[FieldDescriptor] = FIELD_TABLE,
) -> Tuple[Dict[str, str], List[FieldIssue]]:
	values: Dict[str, str] = {}
	issues: List[FieldIssue] = []
	for descriptor in table:
		value = locate_field(tree, descriptor)
		if value is None:
			logger.debug("Tag {} not found", descriptor.name)
			issues.append(FieldIssue(descriptor.name, ErrorKind.ABSENT_TAG))
			continue
		values[descriptor.name] = value
	return values, issues
