from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..services.domain import ProcessingError, StoredImageDescriptor, UploadBatchResult


class StoredImage(BaseModel):
    """Descriptor of an image hosted by the provider"""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="HTTPS URL of the hosted image")
    public_id: str = Field(
        ..., alias="publicId", description="Provider identifier, used for deletion"
    )
    size: int = Field(..., description="Stored size in bytes")
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    format: str = Field(..., description="Stored image format")
    original_name: str = Field(
        ..., alias="originalName", description="Original filename of uploaded image"
    )

    @classmethod
    def from_descriptor(cls, descriptor: StoredImageDescriptor) -> "StoredImage":
        return cls(
            url=descriptor.url,
            public_id=descriptor.public_id,
            size=descriptor.size,
            width=descriptor.width,
            height=descriptor.height,
            format=descriptor.format,
            original_name=descriptor.original_filename,
        )


class FileError(BaseModel):
    """Failure of a single file within a batch"""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error message")
    original_name: str = Field(
        ..., alias="originalName", description="Original filename of uploaded image"
    )

    @classmethod
    def from_processing_error(cls, error: ProcessingError) -> "FileError":
        return cls(error=error.message, original_name=error.original_filename)


class UploadResponse(BaseModel):
    """Response model for a batch upload"""

    success: bool = Field(default=True)
    images: list[StoredImage] = Field(..., description="Successfully stored images")
    errors: list[FileError] = Field(..., description="Files that failed")
    total: int = Field(..., description="Number of files processed")

    @classmethod
    def from_batch(cls, batch: UploadBatchResult) -> "UploadResponse":
        return cls(
            images=[StoredImage.from_descriptor(d) for d in batch.images],
            errors=[FileError.from_processing_error(e) for e in batch.errors],
            total=batch.total,
        )


class DeleteResponse(BaseModel):
    success: bool = Field(default=True)
    message: str = Field(..., description="Success message")
    result: dict[str, Any] = Field(..., description="Raw provider deletion result")


class ErrorResponse(BaseModel):
    """Error response model"""

    success: bool = Field(default=False)
    error: str = Field(..., description="Error message")
    details: str | None = Field(None, description="Stack trace (development only)")
