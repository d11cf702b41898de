from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageColor


def apply_exif_orientation(img: Image.Image, orientation: str) -> Image.Image:
	if not orientation:
		return img
	try:
		o = int(orientation)
	except ValueError:
		return img
	if o == 1:
		return img
	if o == 2:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
	if o == 3:
		return img.rotate(180, expand=True)
	if o == 4:
		return img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
	if o == 5:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(90, expand=True)
	if o == 6:
		return img.rotate(270, expand=True)
	if o == 7:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(270, expand=True)
	if o == 8:
		return img.rotate(90, expand=True)
	return img


def parse_color(value: str) -> Tuple[int, int, int]:
	"""Accept ``#rrggbb`` or a Pillow color name."""
	return ImageColor.getrgb(value)[:3]
