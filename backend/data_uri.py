"""Data URI helpers — encode bytes inline and decode them back."""

import base64
import binascii

from errors import DataUriError


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


def parse_data_uri(data_uri: str) -> tuple[str | None, str]:
    """Split a data URI into (mime type, base64 payload).

    Raises DataUriError when the scheme prefix or the payload segment is missing.
    """
    if not data_uri.startswith("data:"):
        raise DataUriError("Invalid data URI")

    header, _, payload = data_uri.partition(",")
    if not payload:
        raise DataUriError("Invalid data URI format")

    mime_type = header[len("data:"):].split(";")[0].strip() or None
    return mime_type, payload


def decode_data_uri(data_uri: str) -> tuple[str | None, bytes]:
    """Return (mime type, raw bytes) for a base64 data URI."""
    mime_type, payload = parse_data_uri(data_uri)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataUriError(f"Invalid base64 payload: {e}") from e
    return mime_type, data
