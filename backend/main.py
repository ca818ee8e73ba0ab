"""Cloud QR — Main application entry point."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import Settings
from logging_config import setup_logging
from api.download.controllers.download_controller import router as download_router
from api.files.controllers.files_controller import router as files_router
from api.files.repositories.files_repository import FilesRepository
from api.pages.controllers.pages_controller import router as pages_router
from api.qr.controllers.qr_controller import router as qr_router
from api.upload.controllers.upload_controller import router as upload_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent.parent / "static"

MOBILE_UA = re.compile(r"iPhone|iPad|iPod|Android", re.IGNORECASE)


def create_app(
    settings: Settings | None = None, files_repository: FilesRepository | None = None
) -> FastAPI:
    """Build the app around one settings object; tests pass their own repository."""
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0")
    app.state.settings = settings
    app.state.files_repository = files_repository or FilesRepository(settings)

    logger.info(
        f"Cloudinary configured: {'yes' if settings.cloudinary_configured else 'no'}"
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def detect_mobile(request: Request, call_next):
        request.state.is_mobile = bool(MOBILE_UA.search(request.headers.get("user-agent", "")))
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request data"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )

    # Static files
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "message": "Server running",
            "cloudinary": {
                "cloud_name": "Configured" if settings.cloudinary_configured else "Not configured"
            },
        }

    @app.get("/test-upload")
    async def test_upload():
        return {
            "message": "Upload endpoint working",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(pages_router)
    app.include_router(upload_router)
    app.include_router(qr_router)
    app.include_router(download_router)
    app.include_router(files_router)

    return app


app = create_app()
