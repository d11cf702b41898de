from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
	ABSENT_TAG = "absent_tag"
	UNPARSEABLE_TIMESTAMP = "unparseable_timestamp"
	MALFORMED_RATIONAL = "malformed_rational"
	MALFORMED_CONTAINER = "malformed_container"
	MISSING_FILE = "missing_file"

	@property
	def fatal(self) -> bool:
		return self in (ErrorKind.MALFORMED_CONTAINER, ErrorKind.MISSING_FILE)


class ExifFrameError(Exception):
	"""Fatal extraction failure; carries the stage and field that triggered it."""

	kind = ErrorKind.MALFORMED_CONTAINER

	def __init__(self, message: str, stage: str, field: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.stage = stage
		self.field = field

	def __str__(self) -> str:
		where = f"{self.stage}:{self.field}" if self.field else self.stage
		return f"[{where}] {self.message}"

	def to_dict(self) -> dict:
		return {
			"kind": self.kind.value,
			"stage": self.stage,
			"field": self.field,
			"message": self.message,
		}


class MissingMetadataError(ExifFrameError):
	kind = ErrorKind.MISSING_FILE


class MalformedMetadataError(ExifFrameError):
	kind = ErrorKind.MALFORMED_CONTAINER


@dataclass(frozen=True)
class FieldIssue:
	field: str
	kind: ErrorKind
	detail: str = ""
