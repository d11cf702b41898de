from __future__ import annotations

from io import BytesIO

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response
from loguru import logger
from PIL import Image

from exiframe.services.errors import ExifFrameError, MissingMetadataError
from exiframe.services.framing import FrameConfig, FrameOptions, encode_jpeg, frame_image, output_name
from exiframe.services.metadata import Extraction, extract_metadata


router = APIRouter(prefix="/frame", tags=["frame"])

DEFAULT_CONFIG = FrameConfig()


def _frame_config(request: Request) -> FrameConfig:
	return getattr(request.app.state, "frame_config", DEFAULT_CONFIG)


def _extract_or_raise(data: bytes, filename: str) -> Extraction:
	try:
		return extract_metadata(data)
	except MissingMetadataError as e:
		logger.warning("Upload {} rejected: {}", filename, e)
		raise HTTPException(status_code=400, detail=e.to_dict()) from e
	except ExifFrameError as e:
		logger.warning("Upload {} rejected: {}", filename, e)
		raise HTTPException(status_code=422, detail=e.to_dict()) from e


@router.post("/metadata", summary="Extract the caption fields from an uploaded JPEG")
def metadata(file: UploadFile = File(...)):
	data = file.file.read()
	extraction = _extract_or_raise(data, file.filename or "image.jpg")
	return extraction.to_dict()


@router.post("", summary="Return the uploaded JPEG framed and captioned")
def frame(
	request: Request,
	file: UploadFile = File(...),
	black: bool = Form(False),
	no_frame: bool = Form(False),
	no_model: bool = Form(False),
):
	data = file.file.read()
	filename = file.filename or "image.jpg"
	extraction = _extract_or_raise(data, filename)
	options = FrameOptions(black=black, no_frame=no_frame, no_model=no_model)
	config = _frame_config(request)
	with Image.open(BytesIO(data)) as img:
		img.load()
		framed = frame_image(img, extraction.record, options, config)
	out_name = output_name(filename, config.prefix)
	return Response(
		content=encode_jpeg(framed, config.quality),
		media_type="image/jpeg",
		headers={"Content-Disposition": f'attachment; filename="{out_name}"'},
	)
