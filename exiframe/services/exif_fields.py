"""
EXIF field table - which tags exiframe reads and where they live

Tag ids and IFD placement follow CIPA DC-008 (Exif 3.0).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

IFD_PATH = "IFD"
EXIF_IFD_PATH = "IFD/Exif"
GPS_IFD_PATH = "IFD/GPSInfo"


class FieldKind(Enum):
	TEXT = "text"
	RATIONAL = "rational"
	TIMESTAMP = "timestamp"
	INTEGER = "integer"


@dataclass(frozen=True)
class FieldDescriptor:
	name: str
	tag_id: int
	ifd_path: str
	kind: FieldKind
	attr: str


FIELD_TABLE: Tuple[FieldDescriptor, ...] = (
	FieldDescriptor("Make", 0x010F, IFD_PATH, FieldKind.TEXT, "make"),
	FieldDescriptor("Model", 0x0110, IFD_PATH, FieldKind.TEXT, "model"),
	FieldDescriptor("LensMake", 0xA433, EXIF_IFD_PATH, FieldKind.TEXT, "lens_make"),
	FieldDescriptor("LensModel", 0xA434, EXIF_IFD_PATH, FieldKind.TEXT, "lens_model"),
	FieldDescriptor("ExposureTime", 0x829A, EXIF_IFD_PATH, FieldKind.TEXT, "exposure_time"),
	FieldDescriptor("FNumber", 0x829D, EXIF_IFD_PATH, FieldKind.RATIONAL, "f_number"),
	# ISOSpeedRatings before Exif 2.3
	FieldDescriptor("PhotographicSensitivity", 0x8827, EXIF_IFD_PATH, FieldKind.TEXT, "photographic_sensitivity"),
	# 0 means the 35mm equivalent is unknown
	FieldDescriptor("FocalLengthIn35mmFilm", 0xA405, EXIF_IFD_PATH, FieldKind.TEXT, "focal_length_in_35mm_film"),
	FieldDescriptor("FocalLength", 0x920A, EXIF_IFD_PATH, FieldKind.TEXT, "focal_length"),
	FieldDescriptor("DateTimeOriginal", 0x9003, EXIF_IFD_PATH, FieldKind.TIMESTAMP, "date_time_original"),
	FieldDescriptor("PixelXDimension", 0xA002, EXIF_IFD_PATH, FieldKind.INTEGER, "pixel_x_dimension"),
	FieldDescriptor("PixelYDimension", 0xA003, EXIF_IFD_PATH, FieldKind.INTEGER, "pixel_y_dimension"),
	FieldDescriptor("Orientation", 0x0112, IFD_PATH, FieldKind.TEXT, "orientation"),
)

FIELDS_BY_NAME: Mapping[str, FieldDescriptor] = MappingProxyType({d.name: d for d in FIELD_TABLE})
