"""QR Data Transfer Objects."""

from pydantic import BaseModel, ConfigDict, Field


class GenerateQRRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cloudinary_url: str | None = Field(default=None, alias="cloudinaryUrl")
    custom_url: str | None = Field(default=None, alias="customUrl")


class GenerateCustomQRRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    custom_url: str | None = Field(default=None, alias="customUrl")


class QRResponse(BaseModel):
    success: bool = True
    qr_code: str = Field(serialization_alias="qrCode")
    message: str = "QR code generated successfully"
    source: str
    formatted_url: str | None = Field(default=None, serialization_alias="formattedUrl")
