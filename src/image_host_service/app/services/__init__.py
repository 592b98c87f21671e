from .image_transcoder import ImageTranscoder
from .storage_client import CloudinaryStorageClient
from .upload_intake import UploadIntake
from .upload_pipeline import UploadPipeline

__all__ = [
    "ImageTranscoder",
    "CloudinaryStorageClient",
    "UploadIntake",
    "UploadPipeline",
]
