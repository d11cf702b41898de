"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union


class JsonSettings:
	"""JSON settings reader with dotted-key access.

	With no path the reader is empty and every lookup returns its default.
	"""

	def __init__(self, settings_path: Optional[Union[str, Path]] = None) -> None:
		self._data: dict = {}
		self._path = Path(settings_path) if settings_path is not None else None
		if self._path is None:
			return
		if not self._path.exists():
			raise FileNotFoundError(f"settings file not found: {self._path}")
		with self._path.open("r", encoding="utf-8") as f:
			self._data = json.load(f)

	def get(self, key: str, default: Any = None) -> Any:
		"""Return value for dotted `key`, or `default` if not present."""
		node: Any = self._data
		for part in key.split("."):
			if isinstance(node, dict) and part in node:
				node = node[part]
			else:
				return default
		return node
