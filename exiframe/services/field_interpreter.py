from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from exiframe.services.errors import ErrorKind, FieldIssue, MalformedMetadataError
from exiframe.services.exif_fields import FIELD_TABLE, FIELDS_BY_NAME, FieldDescriptor, FieldKind

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
DISPLAY_DATETIME_FORMAT = "%Y/%m/%d %H:%M"
_EXIF_DATETIME_RE = re.compile(r"\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}")
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ExifRecord:
	make: str = ""
	model: str = ""
	lens_make: str = ""
	lens_model: str = ""
	exposure_time: str = ""
	f_number: str = ""
	photographic_sensitivity: str = ""
	focal_length_in_35mm_film: str = ""
	focal_length: str = ""
	date_time_original: str = ""
	pixel_x_dimension: int = 0
	pixel_y_dimension: int = 0
	orientation: str = ""

	def as_dict(self) -> Dict[str, object]:
		attrs = asdict(self)
		return {d.name: attrs[d.attr] for d in FIELD_TABLE}


class SkipField(Exception):
	"""Raised by a converter when the value is dropped without failing the run."""

	def __init__(self, kind: ErrorKind, detail: str) -> None:
		super().__init__(detail)
		self.kind = kind
		self.detail = detail


def convert_text(name: str, raw: str) -> str:
	return raw


def convert_rational(name: str, raw: str) -> str:
	if "/" not in raw:
		return raw
	parts = raw.split("/")
	try:
		if len(parts) != 2:
			raise ValueError("expected numerator/denominator")
		num, den = int(parts[0]), int(parts[1])
		return "{:.1f}".format(num / den)
	except (ValueError, ZeroDivisionError) as e:
		logger.warning("Malformed rational for {}: {!r} ({})", name, raw, e)
		return raw


def convert_timestamp(name: str, raw: str) -> str:
	if not _EXIF_DATETIME_RE.fullmatch(raw):
		raise SkipField(ErrorKind.UNPARSEABLE_TIMESTAMP, f"{raw!r} does not match YYYY:MM:DD HH:MM:SS")
	try:
		t = datetime.strptime(raw, EXIF_DATETIME_FORMAT)
	except ValueError as e:
		raise SkipField(ErrorKind.UNPARSEABLE_TIMESTAMP, str(e)) from e
	return t.strftime(DISPLAY_DATETIME_FORMAT)


def convert_integer(name: str, raw: str) -> int:
	if not _DECIMAL_RE.fullmatch(raw):
		raise MalformedMetadataError(f"cannot parse {raw!r} as integer", stage="parse", field=name)
	return int(raw, 10)


CONVERTERS: Mapping[FieldKind, Callable[[str, str], object]] = {
	FieldKind.TEXT: convert_text,
	FieldKind.RATIONAL: convert_rational,
	FieldKind.TIMESTAMP: convert_timestamp,
	FieldKind.INTEGER: convert_integer,
}


def _is_malformed_rational(raw: str, converted: object) -> bool:
	return "/" in raw and converted == raw


def interpret(descriptor: FieldDescriptor, raw: str) -> object:
	"""Convert one raw decoded value into its display form.

	Raises SkipField for non-fatal drops and MalformedMetadataError for fatal ones.
	"""
	return CONVERTERS[descriptor.kind](descriptor.name, raw)


def interpret_fields(values: Mapping[str, str]) -> Tuple[ExifRecord, List[FieldIssue]]:
	"""Build an ExifRecord from raw values keyed by logical field name.

	Names missing from ``values`` stay at the record defaults.
	"""
	out: Dict[str, object] = {}
	issues: List[FieldIssue] = []
	for name, raw in values.items():
		descriptor: Optional[FieldDescriptor] = FIELDS_BY_NAME.get(name)
		if descriptor is None:
			raise KeyError(f"unknown field {name!r}")
		try:
			converted = interpret(descriptor, raw)
		except SkipField as e:
			logger.info("Skipping {}: {}", name, e.detail)
			issues.append(FieldIssue(name, e.kind, e.detail))
			continue
		if descriptor.kind is FieldKind.RATIONAL and _is_malformed_rational(raw, converted):
			issues.append(FieldIssue(name, ErrorKind.MALFORMED_RATIONAL, raw))
		out[descriptor.attr] = converted
	return ExifRecord(**out), issues
