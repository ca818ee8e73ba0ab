"""QR controller — QR code generation from uploaded or custom URLs."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config import Settings
from dependencies import get_settings
from errors import InvalidInputError
from api.qr.dto.qr import GenerateCustomQRRequest, GenerateQRRequest, QRResponse
from api.qr.services import qr_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["QR"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.post("/generate-qr", response_model=QRResponse, response_model_exclude_none=True)
async def generate_qr(data: GenerateQRRequest, settings: Settings = Depends(get_settings)):
    """QR code for the uploaded file's URL, or for a custom URL."""
    raw_url = data.cloudinary_url or data.custom_url
    if not raw_url:
        return _error(400, "No URL available")

    try:
        url = qr_service.normalize_url(raw_url)
        qr_code = qr_service.generate_qr_data_uri(
            url, box_size=settings.QR_BOX_SIZE, border=settings.QR_BORDER
        )
    except InvalidInputError as e:
        return _error(e.status_code, e.message)
    except Exception:
        logger.exception("Error generating QR code")
        return _error(500, "Error generating QR code")

    return QRResponse(
        qr_code=qr_code,
        source="cloudinary" if data.cloudinary_url else "custom",
    )


@router.post("/generate-custom-qr", response_model=QRResponse)
async def generate_custom_qr(
    data: GenerateCustomQRRequest, settings: Settings = Depends(get_settings)
):
    if not data.custom_url or not data.custom_url.strip():
        return _error(400, "Please enter a URL")

    try:
        url = qr_service.normalize_url(data.custom_url)
        qr_code = qr_service.generate_qr_data_uri(
            url, box_size=settings.QR_BOX_SIZE, border=settings.QR_BORDER
        )
    except InvalidInputError as e:
        return _error(e.status_code, e.message)
    except Exception:
        logger.exception("Error generating custom QR code")
        return _error(500, "Error generating QR code")

    return QRResponse(qr_code=qr_code, source="custom", formatted_url=url)
