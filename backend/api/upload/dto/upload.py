"""Upload Data Transfer Objects."""

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    """A decoded upload: raw bytes plus what the client declared about them."""

    data: bytes
    filename: str
    content_type: str


class UploadPayload(BaseModel):
    """JSON body of a base64 upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_data: str | None = Field(default=None, alias="fileData")
    file_name: str | None = Field(default=None, alias="fileName")
    file_type: str | None = Field(default=None, alias="fileType")


class UploadedFile(BaseModel):
    name: str
    type: str
    public_id: str = Field(serialization_alias="publicId")
    format: str | None = None
    size: str


class UploadResponse(BaseModel):
    success: bool = True
    cloudinary_url: str = Field(serialization_alias="cloudinaryUrl")
    uploaded_file: UploadedFile = Field(serialization_alias="uploadedFile")
