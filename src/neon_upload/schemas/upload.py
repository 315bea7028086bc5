from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FileType = Literal["image", "video", "audio"]


class UploadResponse(BaseModel):
    """Response schema for POST /api/upload."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    filename: str
    server_filename: str = Field(alias="serverFilename")
    url: str
    preview_url: str | None = Field(default=None, alias="previewUrl")
    pathname: str
    size: int
    content_type: str = Field(alias="contentType")
    file_type: FileType = Field(alias="fileType")
    uploaded_at: datetime = Field(alias="uploadedAt")
    message: str = "File uploaded successfully to server"


class ErrorResponse(BaseModel):
    """Body returned with every 4xx/5xx status."""
    error: str
    details: str | None = None


class UsageInfo(BaseModel):
    description: str
    example: str


class CapabilitiesResponse(BaseModel):
    """Response schema for GET /api/upload."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    endpoint: str
    method: str
    content_type: str = Field(alias="contentType")
    supported_formats: list[str] = Field(alias="supportedFormats")
    file_types: dict[str, list[str]] = Field(alias="fileTypes")
    max_file_size: str = Field(alias="maxFileSize")
    max_file_sizes: dict[str, int] = Field(alias="maxFileSizes")
    preview_max_size: int = Field(alias="previewMaxSize")
    note: str
    usage: UsageInfo
