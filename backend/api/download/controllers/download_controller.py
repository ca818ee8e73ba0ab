"""Download controller — relays a QR data URI back as a file attachment."""

import io
import logging

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse, StreamingResponse

from errors import DataUriError
from api.download.services import download_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Download"])

CHUNK_SIZE = 64 * 1024


@router.get("/download-qr")
async def download_qr(
    data_uri: str | None = Query(default=None, alias="dataUri"),
    filename: str | None = None,
):
    """Stream the decoded data URI as an attachment."""
    if not data_uri:
        return PlainTextResponse("No QR code to download", status_code=400)

    try:
        content, media_type, name = download_service.get_file_for_download(data_uri, filename)
    except DataUriError as e:
        logger.error(f"Error downloading QR code: {e.message}")
        return PlainTextResponse(
            f"Error downloading QR code: {e.message}", status_code=e.status_code
        )

    def iterfile():
        buf = io.BytesIO(content)
        while chunk := buf.read(CHUNK_SIZE):
            yield chunk

    return StreamingResponse(
        iterfile(),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{name}"',
            "Content-Length": str(len(content)),
        },
    )
