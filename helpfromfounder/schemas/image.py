"""Image relay schemas. Bodies follow the {success, ...} envelope of the image endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ImageUploadResponse(BaseModel):
    success: bool = True
    key: str


class ImageUploadUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_type: str = Field(..., alias="fileType")


class ImageUploadUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    upload_url: str = Field(..., serialization_alias="uploadUrl")
    key: str


class ImageErrorResponse(BaseModel):
    success: bool = False
    error: str
