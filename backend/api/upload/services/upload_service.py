"""Upload service — validates files and forwards them to the storage provider."""

import io
import logging
import mimetypes
import os
import re
import tempfile
import time
from pathlib import Path
from typing import AsyncIterator

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from config import Settings
from data_uri import decode_data_uri
from errors import (
    DataUriError,
    InvalidInputError,
    PayloadTooLargeError,
    StorageProviderError,
    UnsupportedMediaTypeError,
)
from api.files.dto.file import StoredResource
from api.files.repositories.files_repository import FilesRepository
from api.files.services.files_service import format_kb
from api.upload.dto.upload import UploadedFile, UploadPayload, UploadRequest, UploadResponse

logger = logging.getLogger(__name__)

# Headers, boundaries and small form fields around the file part
BODY_OVERHEAD = 64 * 1024


def resolve_content_type(
    declared: str | None, filename: str, fallback: str | None = None
) -> str:
    """Declared type first, then the data URI's type, then a guess from the name."""
    for candidate in (declared, fallback):
        if candidate and candidate.strip():
            return candidate.split(";")[0].strip().lower()
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def classify_resource_type(content_type: str) -> str:
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return "raw"


def check_content_type(content_type: str, settings: Settings) -> None:
    if content_type not in settings.ALLOWED_MIME_TYPES:
        raise UnsupportedMediaTypeError(f"File type not allowed: {content_type}")


def check_size(size: int, settings: Settings, limit: int | None = None) -> None:
    if size > (limit if limit is not None else settings.MAX_UPLOAD_SIZE):
        limit_mb = settings.MAX_UPLOAD_SIZE / (1024 * 1024)
        raise PayloadTooLargeError(f"File exceeds max size of {limit_mb:g}MB")


def max_body_size(settings: Settings, base64_encoded: bool) -> int:
    """Largest request body that can still carry a file within the upload ceiling."""
    limit = settings.MAX_UPLOAD_SIZE
    if base64_encoded:
        limit = -(-limit * 4 // 3)
    return limit + BODY_OVERHEAD


def build_public_id(filename: str, folder: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe_name = re.sub(r"[^a-zA-Z0-9]", "_", filename)
    return f"{folder}/{now_ms}-{safe_name}"


def describe_provider_error(message: str) -> str:
    """Turn a raw provider message into something a user can act on."""
    if "File size too large" in message:
        return "The file is too large"
    if "Invalid image file" in message:
        return "Invalid image file"
    if "format" in message:
        return "Unsupported file format"
    return f"Error: {message}"


def _to_response(stored: StoredResource, filename: str) -> UploadResponse:
    return UploadResponse(
        cloudinary_url=stored.secure_url,
        uploaded_file=UploadedFile(
            name=filename,
            type=stored.resource_type,
            public_id=stored.public_id,
            format=stored.format,
            size=format_kb(stored.size),
        ),
    )


async def _forward(
    source,
    filename: str,
    content_type: str,
    settings: Settings,
    repository: FilesRepository,
) -> UploadResponse:
    resource_type = classify_resource_type(content_type)
    public_id = build_public_id(filename, settings.CLOUDINARY_FOLDER)
    logger.info(f"Uploading {filename} to Cloudinary as {resource_type}")

    try:
        stored = await repository.upload(source, public_id=public_id, resource_type=resource_type)
    except StorageProviderError as e:
        raise StorageProviderError(describe_provider_error(e.message)) from e

    logger.info(f"Uploaded {filename}: {stored.secure_url}")
    return _to_response(stored, filename)


async def save_upload(
    upload: UploadRequest, settings: Settings, repository: FilesRepository
) -> UploadResponse:
    """Validate an in-memory upload and forward it to the provider."""
    check_content_type(upload.content_type, settings)
    check_size(len(upload.data), settings)
    return await _forward(
        io.BytesIO(upload.data), upload.filename, upload.content_type, settings, repository
    )


def parse_payload(payload: UploadPayload) -> UploadRequest:
    """Decode a JSON base64 upload body into an UploadRequest."""
    if not payload.file_data or not payload.file_name:
        raise InvalidInputError("Incomplete file data")
    if not payload.file_data.startswith("data:"):
        raise InvalidInputError("Invalid data format. A data URL was expected.")

    try:
        uri_type, data = decode_data_uri(payload.file_data)
    except DataUriError as e:
        raise InvalidInputError(f"Malformed data URL: {e.message}") from e

    return UploadRequest(
        data=data,
        filename=payload.file_name,
        content_type=resolve_content_type(payload.file_type, payload.file_name, uri_type),
    )


async def save_data_uri_upload(
    payload: UploadPayload, settings: Settings, repository: FilesRepository
) -> UploadResponse:
    return await save_upload(parse_payload(payload), settings, repository)


class FormFileSpool:
    """Writes the ``file`` part of a multipart body to a temp file as it arrives.

    Part headers are checked before any data is written; the part size is
    checked on every chunk.
    """

    def __init__(self, boundary: bytes, settings: Settings):
        self.settings = settings
        self.filename: str | None = None
        self.content_type: str | None = None
        self.size = 0
        self.tmp = None
        self._headers: dict[bytes, bytes] = {}
        self._field = b""
        self._value = b""
        self._writing = False
        self.parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
            },
        )

    @property
    def path(self) -> str | None:
        return self.tmp.name if self.tmp else None

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._writing = False

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._field.lower()] = self._value
        self._field = b""
        self._value = b""

    def _on_headers_finished(self) -> None:
        _, params = parse_options_header(self._headers.get(b"content-disposition", b""))
        if params.get(b"name") != b"file" or self.tmp is not None:
            return

        filename = params.get(b"filename", b"").decode("utf-8", "replace")
        if not filename:
            raise InvalidInputError("No file selected")
        declared = self._headers.get(b"content-type", b"").decode("latin-1")
        content_type = resolve_content_type(declared, filename)
        check_content_type(content_type, self.settings)

        self.filename = filename
        self.content_type = content_type
        Path(self.settings.UPLOAD_TMP_DIR).mkdir(parents=True, exist_ok=True)
        self.tmp = tempfile.NamedTemporaryFile(
            delete=False, dir=self.settings.UPLOAD_TMP_DIR, suffix=Path(filename).suffix
        )
        self._writing = True

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if not self._writing:
            return
        chunk = data[start:end]
        self.size += len(chunk)
        check_size(self.size, self.settings)
        self.tmp.write(chunk)

    def _on_part_end(self) -> None:
        self._writing = False

    def write(self, chunk: bytes) -> None:
        try:
            self.parser.write(chunk)
        except MultipartParseError as e:
            raise InvalidInputError("Malformed multipart body") from e

    def finish(self) -> None:
        try:
            self.parser.finalize()
        except MultipartParseError as e:
            raise InvalidInputError("Malformed multipart body") from e
        if self.tmp:
            self.tmp.close()

    def cleanup(self) -> None:
        if self.tmp is None:
            return
        self.tmp.close()
        if os.path.exists(self.tmp.name):
            os.unlink(self.tmp.name)


async def save_form_upload(
    chunks: AsyncIterator[bytes],
    content_type_header: str,
    settings: Settings,
    repository: FilesRepository,
) -> UploadResponse:
    """Stream a multipart body to a temp file, forward it, then remove the temp file."""
    _, params = parse_options_header(content_type_header)
    boundary = params.get(b"boundary")
    if not boundary:
        raise InvalidInputError("Missing multipart boundary")

    spool = FormFileSpool(boundary, settings)
    try:
        async for chunk in chunks:
            spool.write(chunk)
        spool.finish()
        if spool.filename is None:
            raise InvalidInputError("No file provided")
        return await _forward(
            spool.path, spool.filename, spool.content_type, settings, repository
        )
    finally:
        spool.cleanup()
