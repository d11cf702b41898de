from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, Optional

import piexif
import pytest
from loguru import logger
from PIL import Image


@pytest.fixture(autouse=True)
def _reset_loguru():
	yield
	# CLI tests point loguru at capsys streams; drop them before they close
	logger.remove()
	logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def canon_exif() -> Dict[str, dict]:
	return {
		"0th": {
			piexif.ImageIFD.Make: "Canon",
			piexif.ImageIFD.Model: "EOS R5",
			piexif.ImageIFD.Orientation: 1,
		},
		"Exif": {
			piexif.ExifIFD.ExposureTime: (1, 250),
			piexif.ExifIFD.FNumber: (18, 10),
			piexif.ExifIFD.ISOSpeedRatings: 100,
			piexif.ExifIFD.FocalLengthIn35mmFilm: 50,
			piexif.ExifIFD.FocalLength: (50, 1),
			piexif.ExifIFD.DateTimeOriginal: "2022:01:01 12:00:00",
			piexif.ExifIFD.PixelXDimension: 6000,
			piexif.ExifIFD.PixelYDimension: 4000,
		},
		"GPS": {},
	}


def jpeg_bytes(exif: Optional[dict] = None, size=(400, 300), color=(200, 30, 30)) -> bytes:
	img = Image.new("RGB", size, color)
	buf = BytesIO()
	if exif is None:
		img.save(buf, format="JPEG")
	else:
		img.save(buf, format="JPEG", exif=piexif.dump(exif))
	return buf.getvalue()


@pytest.fixture
def make_jpeg(tmp_path: Path) -> Callable[..., Path]:
	def _make(exif: Optional[dict] = None, name: str = "photo.jpg", size=(400, 300)) -> Path:
		path = tmp_path / name
		path.write_bytes(jpeg_bytes(exif, size=size))
		return path

	return _make
