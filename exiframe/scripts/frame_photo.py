"""
Frame Photo - border a JPEG and caption it with its EXIF shooting data

Writes exiframe-<name> into the current directory (or --output-dir):
- camera and lens on the left
- focal length, aperture, shutter speed, ISO and capture time on the right
"""


from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from exiframe.infrastructure.logging import find_latest_log_file, init_logging
from exiframe.infrastructure.settings import JsonSettings
from exiframe.services.errors import ExifFrameError
from exiframe.services.framing import FrameConfig, FrameOptions, frame_photo
from exiframe.services.metadata import extract_metadata, write_metadata_json


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="exiframe-cli", description="Frame a JPEG and caption it with its EXIF data")
	parser.add_argument("-f", "--file", dest="file_path", default="", help="Path to the image file (required)")
	parser.add_argument("-black", "--black", action="store_true", help="Use black color frame (default white)")
	parser.add_argument("-no-frame", "--no-frame", action="store_true", help="Do not draw frame (default draw frame)")
	parser.add_argument("-no-model", "--no-model", action="store_true", help="Do not draw model data (default draw model data)")
	parser.add_argument("--output-dir", default=".", help="Folder for the framed image (default: current directory)")
	parser.add_argument("--settings", default=None, help="JSON settings file")
	parser.add_argument("--metadata-json", default=None, help="Also write the extracted metadata to this JSON file")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)

	try:
		settings = JsonSettings(args.settings)
	except (OSError, ValueError) as e:
		print(f"Error loading settings: {e}", file=sys.stderr)
		return 1

	level = "DEBUG" if args.verbose else str(settings.get("logging.level", "INFO"))
	log_dir = settings.get("logging.dir")
	init_logging(level, log_dir)

	if not args.file_path:
		parser.print_usage(sys.stderr)
		print("Please provide a file path using -f flag", file=sys.stderr)
		return 1

	config = FrameConfig.from_settings(settings)
	options = FrameOptions(black=args.black, no_frame=args.no_frame, no_model=args.no_model)

	try:
		extraction = extract_metadata(args.file_path)
	except ExifFrameError as e:
		logger.error("Extraction failed at stage {} (field {}): {}", e.stage, e.field or "-", e.message)
		if log_dir:
			latest = find_latest_log_file(log_dir)
			if latest is not None:
				print(f"See log: {latest}", file=sys.stderr)
		return 1

	if args.metadata_json:
		write_metadata_json(extraction, Path(args.metadata_json))

	try:
		out_path = frame_photo(args.file_path, extraction.record, options, config, args.output_dir)
	except OSError as e:
		logger.error("Framing failed for {}: {}", args.file_path, e)
		return 1
	print(out_path)
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
