"""Upload controller — multipart and base64 JSON uploads."""

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config import Settings
from dependencies import get_files_repository, get_settings
from errors import AppError, InvalidInputError
from templating import page_context, templates
from api.files.repositories.files_repository import FilesRepository
from api.upload.dto.upload import UploadPayload, UploadResponse
from api.upload.services import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


def _wants_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/html" in accept and "application/json" not in accept


def _check_content_length(request: Request, settings: Settings, limit: int) -> None:
    declared = request.headers.get("content-length", "")
    if declared.isdigit():
        upload_service.check_size(int(declared), settings, limit)


async def _read_limited(
    request: Request, settings: Settings, limit: int
) -> AsyncIterator[bytes]:
    """Yield body chunks, stopping as soon as more than ``limit`` bytes arrive."""
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        upload_service.check_size(received, settings, limit)
        yield chunk


async def _upload_form(
    request: Request, settings: Settings, repository: FilesRepository
) -> UploadResponse:
    limit = upload_service.max_body_size(settings, base64_encoded=False)
    _check_content_length(request, settings, limit)
    return await upload_service.save_form_upload(
        _read_limited(request, settings, limit),
        request.headers["content-type"],
        settings,
        repository,
    )


async def _upload_json(
    request: Request, settings: Settings, repository: FilesRepository
) -> UploadResponse:
    limit = upload_service.max_body_size(settings, base64_encoded=True)
    _check_content_length(request, settings, limit)
    body = b"".join([chunk async for chunk in _read_limited(request, settings, limit)])
    try:
        payload = UploadPayload.model_validate_json(body)
    except ValidationError as e:
        raise InvalidInputError("Incomplete file data") from e
    logger.info(f"Receiving file {payload.file_name} ({payload.file_type})")
    return await upload_service.save_data_uri_upload(payload, settings, repository)


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    request: Request,
    settings: Settings = Depends(get_settings),
    repository: FilesRepository = Depends(get_files_repository),
):
    """Upload a file to Cloudinary, sent either as multipart form data or JSON."""
    multipart = request.headers.get("content-type", "").startswith("multipart/form-data")
    html = multipart and _wants_html(request)

    try:
        if multipart:
            result = await _upload_form(request, settings, repository)
        else:
            result = await _upload_json(request, settings, repository)
    except AppError as e:
        logger.warning(f"Upload rejected: {e.message}")
        if html:
            return templates.TemplateResponse(
                request,
                "index.html",
                page_context(request, settings.PROJECT_NAME, error=e.message),
                status_code=e.status_code,
            )
        return JSONResponse(
            status_code=e.status_code, content={"success": False, "error": e.message}
        )

    if html:
        return templates.TemplateResponse(
            request,
            "index.html",
            page_context(
                request,
                settings.PROJECT_NAME,
                cloudinary_url=result.cloudinary_url,
                uploaded_file=result.uploaded_file,
            ),
        )
    return result
