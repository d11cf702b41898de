from __future__ import annotations

import json
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Union

import piexif
from loguru import logger
from PIL import Image, UnidentifiedImageError

from exiframe.services.errors import FieldIssue, MalformedMetadataError, MissingMetadataError
from exiframe.services.field_interpreter import ExifRecord, interpret_fields
from exiframe.services.tag_locator import ExifTree, locate_fields

Source = Union[str, Path, bytes]


@dataclass(frozen=True)
class Extraction:
	record: ExifRecord
	issues: List[FieldIssue] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"metadata": self.record.as_dict(),
			"issues": [{"field": i.field, "kind": i.kind.value, "detail": i.detail} for i in self.issues],
		}


def read_exif_block(source: Source) -> bytes:
	name = "<upload>" if isinstance(source, bytes) else str(source)
	try:
		fp = BytesIO(source) if isinstance(source, bytes) else source
		with Image.open(fp) as img:
			raw = img.info.get("exif")
	except (OSError, UnidentifiedImageError) as e:
		raise MissingMetadataError(f"cannot read {name}: {e}", stage="read") from e
	if not raw:
		raise MissingMetadataError(f"no EXIF block in {name}", stage="read")
	return raw


def index_exif_block(raw: bytes) -> ExifTree:
	try:
		exif_dict = piexif.load(raw)
	except Exception as e:
		# piexif surfaces truncated or corrupt IFDs as assorted ValueError/struct.error/IndexError
		raise MalformedMetadataError(f"cannot index EXIF block: {e}", stage="index") from e
	return ExifTree(exif_dict)


def extract_from_tree(tree: ExifTree) -> Extraction:
	values, absent = locate_fields(tree)
	record, skipped = interpret_fields(values)
	return Extraction(record=record, issues=absent + skipped)


def extract_metadata(source: Source) -> Extraction:
	raw = read_exif_block(source)
	tree = index_exif_block(raw)
	extraction = extract_from_tree(tree)
	logger.debug("Extracted {} ({} issues)", extraction.record, len(extraction.issues))
	return extraction


def write_metadata_json(extraction: Extraction, out_path: Path) -> str:
	out_path.parent.mkdir(parents=True, exist_ok=True)
	with out_path.open("w", encoding="utf-8") as f:
		json.dump(extraction.to_dict(), f, indent=2)
	return str(out_path)
