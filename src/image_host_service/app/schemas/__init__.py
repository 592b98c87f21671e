from .status import CloudinaryStatus, EnvironmentInfo, HealthResponse, RootResponse
from .upload import (
    DeleteResponse,
    ErrorResponse,
    FileError,
    StoredImage,
    UploadResponse,
)

__all__ = [
    "CloudinaryStatus",
    "EnvironmentInfo",
    "HealthResponse",
    "RootResponse",
    "DeleteResponse",
    "ErrorResponse",
    "FileError",
    "StoredImage",
    "UploadResponse",
]
