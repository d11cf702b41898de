"""Logging initialization utilities using loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "<level>{level: <8}</level> | {name}:{line} - {message}"


def init_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
	"""Route logs to stderr, plus a rotating file under `log_dir` when given."""
	logger.remove()
	logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, backtrace=False, diagnose=False)
	if log_dir is None:
		return
	log_path = Path(log_dir)
	log_path.mkdir(parents=True, exist_ok=True)
	logger.add(
		str(log_path / "exiframe_{time:YYYYMMDD}.log"),
		rotation="10 MB",
		retention="10 days",
		compression="zip",
		backtrace=False,
		diagnose=False,
		level="DEBUG",
	)


def find_latest_log_file(log_dir: str) -> Optional[Path]:
	"""Find the most recently modified log file in `log_dir`."""
	log_path = Path(log_dir)
	if not log_path.exists():
		return None
	log_files = list(log_path.glob("exiframe_*.log"))
	if not log_files:
		return None
	return max(log_files, key=lambda p: p.stat().st_mtime)
