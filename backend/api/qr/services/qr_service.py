"""QR service — URL normalization and PNG QR code encoding."""

import io
import logging

import qrcode
from pydantic import AnyUrl, TypeAdapter, ValidationError

from data_uri import encode_data_uri
from errors import InvalidInputError

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


def normalize_url(raw: str) -> str:
    """Trim and prepend https:// when no http(s) scheme is present, then validate."""
    url = raw.strip()
    if not url:
        raise InvalidInputError("Please enter a URL")
    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    try:
        _url_adapter.validate_python(url)
    except ValidationError as e:
        raise InvalidInputError("Invalid URL") from e
    return url


def render_png(data: str, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qr_data_uri(url: str, box_size: int = 10, border: int = 2) -> str:
    """Encode an already-normalized URL as a PNG QR code data URI."""
    png = render_png(url, box_size=box_size, border=border)
    logger.info(f"Generated QR code for {url} ({len(png)} bytes)")
    return encode_data_uri(png, "image/png")
