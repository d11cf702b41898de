from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from exiframe.infrastructure.settings import JsonSettings
from exiframe.services.field_interpreter import ExifRecord
from exiframe.services.image_utils import apply_exif_orientation, parse_color

FILE_NAME_PREFIX = "exiframe-"

_BOLD_FONTS = ("DejaVuSansMono-Bold.ttf", "DejaVuSans-Bold.ttf")
_REGULAR_FONTS = ("DejaVuSansMono.ttf", "DejaVuSans.ttf")


@dataclass(frozen=True)
class FrameConfig:
	border_px: int = 180
	caption_height: int = 600
	large_font_size: int = 200
	font_size: int = 150
	bold_font_path: Optional[str] = None
	regular_font_path: Optional[str] = None
	light_color: str = "white"
	dark_color: str = "black"
	prefix: str = FILE_NAME_PREFIX
	quality: int = 100

	@classmethod
	def from_settings(cls, settings: JsonSettings) -> "FrameConfig":
		d = cls()
		return cls(
			border_px=int(settings.get("frame.border_px", d.border_px)),
			caption_height=int(settings.get("frame.caption_height", d.caption_height)),
			large_font_size=int(settings.get("fonts.large_size", d.large_font_size)),
			font_size=int(settings.get("fonts.size", d.font_size)),
			bold_font_path=settings.get("fonts.bold_path"),
			regular_font_path=settings.get("fonts.regular_path"),
			light_color=str(settings.get("colors.light", d.light_color)),
			dark_color=str(settings.get("colors.dark", d.dark_color)),
			prefix=str(settings.get("output.prefix", d.prefix)),
			quality=int(settings.get("output.quality", d.quality)),
		)


@dataclass(frozen=True)
class FrameOptions:
	black: bool = False
	no_frame: bool = False
	no_model: bool = False


@dataclass(frozen=True)
class Captions:
	camera: str
	lens: str
	exposure: str
	taken: str


def build_captions(record: ExifRecord, no_model: bool = False) -> Captions:
	camera = lens = ""
	if not no_model:
		camera = record.make + " " + record.model
		lens = record.lens_make + " " + record.lens_model
	exposure = (
		record.focal_length_in_35mm_film + "mm  "
		+ "f/" + record.f_number + "  "
		+ record.exposure_time + "s  ISO" + record.photographic_sensitivity
	)
	return Captions(camera=camera, lens=lens, exposure=exposure, taken=record.date_time_original)


def load_font(path: Optional[str], fallbacks: Tuple[str, ...], size: int) -> ImageFont.FreeTypeFont:
	if path:
		return ImageFont.truetype(path, size)
	for name in fallbacks:
		try:
			return ImageFont.truetype(name, size)
		except OSError:
			continue
	logger.debug("No system font from {} found; using Pillow's default", fallbacks)
	return ImageFont.load_default(size=size)


def output_name(source_name: str, prefix: str = FILE_NAME_PREFIX) -> str:
	return prefix + Path(source_name).name


def caption_baselines(src_h: int, frame: int, pad: int, config: FrameConfig) -> Tuple[int, int]:
	# line height is the large font size at 72 DPI
	line_height = config.large_font_size
	top = src_h + frame * 2 + pad
	return top + line_height, top + line_height * 2


def frame_image(img: Image.Image, record: ExifRecord, options: FrameOptions, config: FrameConfig) -> Image.Image:
	img = apply_exif_orientation(img, record.orientation)
	if img.mode != "RGB":
		img = img.convert("RGB")
	src_w, src_h = img.size

	frame = 0 if options.no_frame else config.border_px
	pad = config.border_px if options.no_frame else 0

	if options.black:
		frame_color, text_color = parse_color(config.dark_color), parse_color(config.light_color)
	else:
		frame_color, text_color = parse_color(config.light_color), parse_color(config.dark_color)

	dst = Image.new("RGB", (src_w + frame * 2, src_h + frame * 2 + config.caption_height + pad), frame_color)
	dst.paste(img, (frame, frame))

	bold_large = load_font(config.bold_font_path, _BOLD_FONTS, config.large_font_size)
	bold = load_font(config.bold_font_path, _BOLD_FONTS, config.font_size)
	regular = load_font(config.regular_font_path, _REGULAR_FONTS, config.font_size)

	captions = build_captions(record, options.no_model)
	draw = ImageDraw.Draw(dst)
	left = frame + pad
	right = src_w + frame - pad
	line1, line2 = caption_baselines(src_h, frame, pad, config)

	# anchors: l/r = left/right edge, s = baseline
	if captions.camera:
		draw.text((left, line1), captions.camera, font=bold_large, fill=text_color, anchor="ls")
	if captions.lens:
		draw.text((left, line2), captions.lens, font=regular, fill=text_color, anchor="ls")
	draw.text((right, line1), captions.exposure, font=bold, fill=text_color, anchor="rs")
	if captions.taken:
		draw.text((right, line2), captions.taken, font=regular, fill=text_color, anchor="rs")
	return dst


def encode_jpeg(img: Image.Image, quality: int = 100) -> bytes:
	buf = BytesIO()
	img.save(buf, format="JPEG", quality=quality)
	return buf.getvalue()


def frame_photo(
	source: Union[str, Path],
	record: ExifRecord,
	options: FrameOptions,
	config: FrameConfig,
	output_dir: Union[str, Path] = ".",
) -> Path:
	src = Path(source)
	with Image.open(src) as img:
		img.load()
		framed = frame_image(img, record, options, config)
	out_dir = Path(output_dir)
	out_dir.mkdir(parents=True, exist_ok=True)
	out_path = out_dir / output_name(src.name, config.prefix)
	framed.save(out_path, format="JPEG", quality=config.quality)
	logger.info("Saved: {}", out_path)
	return out_path
