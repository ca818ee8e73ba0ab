"""Application configuration."""

import tempfile

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_MIME_TYPES = [
    # Images
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/svg+xml",
    # Video
    "video/mp4",
    "video/mpeg",
    "video/quicktime",
    "video/webm",
    "video/x-msvideo",
    # Documents
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Cloud QR"
    LOG_LEVEL: str = "INFO"

    # Storage provider
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "qr-generator"

    # Uploads
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50 MiB
    ALLOWED_MIME_TYPES: list[str] = DEFAULT_ALLOWED_MIME_TYPES
    UPLOAD_TMP_DIR: str = tempfile.gettempdir()

    # Listing
    FILES_PAGE_SIZE: int = 50

    # QR rendering
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 2

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME)
