from __future__ import annotations

import inspect
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from exiframe.main import create_app

from conftest import jpeg_bytes


@pytest.fixture
def client():
	return TestClient(create_app())


def test_metadata_endpoint(client, canon_exif):
	resp = client.post("/frame/metadata", files={"file": ("photo.jpg", jpeg_bytes(canon_exif), "image/jpeg")})
	assert resp.status_code == 200
	body = resp.json()
	assert body["metadata"]["Make"] == "Canon"
	assert body["metadata"]["FNumber"] == "1.8"
	assert body["metadata"]["PixelXDimension"] == 6000
	assert body["metadata"]["LensModel"] == ""
	assert {"field": "LensModel", "kind": "absent_tag", "detail": ""} in body["issues"]


def test_frame_endpoint_returns_jpeg(client, canon_exif):
	resp = client.post(
		"/frame",
		files={"file": ("photo.jpg", jpeg_bytes(canon_exif), "image/jpeg")},
		data={"black": "true"},
	)
	assert resp.status_code == 200
	assert resp.headers["content-type"] == "image/jpeg"
	assert 'filename="exiframe-photo.jpg"' in resp.headers["content-disposition"]
	with Image.open(BytesIO(resp.content)) as framed:
		assert framed.size == (760, 1260)
		assert max(framed.convert("RGB").getpixel((3, 3))) < 16


def test_upload_without_exif_is_400(client):
	resp = client.post("/frame/metadata", files={"file": ("plain.jpg", jpeg_bytes(None), "image/jpeg")})
	assert resp.status_code == 400
	assert resp.json()["detail"]["kind"] == "missing_file"


def test_corrupt_exif_is_422(client, monkeypatch):
	from exiframe.services import metadata

	def boom(raw):
		raise ValueError("truncated IFD")

	monkeypatch.setattr(metadata.piexif, "load", boom)
	resp = client.post("/frame", files={"file": ("photo.jpg", jpeg_bytes({"0th": {}, "Exif": {}}), "image/jpeg")})
	assert resp.status_code == 422
	detail = resp.json()["detail"]
	assert detail["kind"] == "malformed_container"
	assert detail["stage"] == "index"


def test_app_uses_settings(tmp_path, canon_exif):
	from exiframe.infrastructure.settings import JsonSettings

	path = tmp_path / "settings.json"
	path.write_text('{"frame": {"border_px": 20, "caption_height": 100}, "output": {"prefix": "mat-"}}')
	client = TestClient(create_app(JsonSettings(path)))
	resp = client.post("/frame", files={"file": ("photo.jpg", jpeg_bytes(canon_exif), "image/jpeg")})
	assert resp.status_code == 200
	assert 'filename="mat-photo.jpg"' in resp.headers["content-disposition"]
	with Image.open(BytesIO(resp.content)) as framed:
		assert framed.size == (440, 440)


def test_handlers_run_in_threadpool():
	# plain functions are dispatched off the event loop by FastAPI
	from exiframe.routers import frame_images

	assert not inspect.iscoroutinefunction(frame_images.metadata)
	assert not inspect.iscoroutinefunction(frame_images.frame)
