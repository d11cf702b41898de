from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from exiframe.infrastructure.logging import init_logging
from exiframe.infrastructure.settings import JsonSettings
from exiframe.routers.frame_images import router as frame_router
from exiframe.services.framing import FrameConfig


def create_app(settings: Optional[JsonSettings] = None) -> FastAPI:
	if settings is None:
		settings = JsonSettings(os.environ.get("EXIFRAME_SETTINGS") or None)
	init_logging(str(settings.get("logging.level", "INFO")), settings.get("logging.dir"))

	app = FastAPI(title="exiframe - EXIF caption frames", version="0.1.0")
	app.state.frame_config = FrameConfig.from_settings(settings)

	app.add_middleware(
		CORSMiddleware,
		allow_origins=list(settings.get("api.cors_origins", ["*"])),
		allow_credentials=False,
		allow_methods=["POST"],
		allow_headers=["*"],
	)

	app.include_router(frame_router)

	return app


if __name__ == "__main__":
	# Local dev server: uvicorn exiframe.main:create_app --factory --reload
	import uvicorn

	uvicorn.run("exiframe.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
