"""Download service — turns a data URI back into a downloadable file."""

from pathlib import PurePosixPath

from data_uri import decode_data_uri

DEFAULT_FILENAME = "qrcode.png"
DEFAULT_MEDIA_TYPE = "image/png"


def safe_filename(filename: str | None) -> str:
    """Base name only, without quotes, so it can sit inside Content-Disposition."""
    if not filename:
        return DEFAULT_FILENAME
    name = PurePosixPath(filename.replace("\\", "/")).name
    name = name.replace('"', "").replace("\r", "").replace("\n", "").strip()
    # Response headers are latin-1
    name = name.encode("latin-1", "ignore").decode("latin-1")
    return name or DEFAULT_FILENAME


def get_file_for_download(data_uri: str, filename: str | None) -> tuple[bytes, str, str]:
    """Return (content, media type, filename). Raises DataUriError on a bad URI."""
    mime_type, content = decode_data_uri(data_uri)
    return content, mime_type or DEFAULT_MEDIA_TYPE, safe_filename(filename)
