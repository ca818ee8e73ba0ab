"""File Data Transfer Objects."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StoredResource(BaseModel):
    """A resource as reported back by the storage provider after ingestion."""

    public_id: str
    secure_url: str
    resource_type: str
    format: str | None = None
    size: int | None = None
    created_at: str | None = None


class FileSummary(BaseModel):
    public_id: str = Field(serialization_alias="publicId")
    url: str
    type: str
    format: str | None = None
    size: str
    created_at: str | None = Field(default=None, serialization_alias="createdAt")
    thumbnail: str | None = None


class FileListing(BaseModel):
    files: list[FileSummary] = []
    error: str | None = None


class FileListResponse(BaseModel):
    success: bool
    files: list[FileSummary] = []
    error: str | None = None


class DeleteFileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_id: str = Field(alias="publicId", min_length=1)
    resource_type: Literal["image", "video", "raw"] = Field(default="image", alias="resourceType")


class DeleteFileResponse(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
