from functools import lru_cache

from ..core.config import Settings, get_settings
from ..services.image_transcoder import ImageTranscoder
from ..services.storage_client import CloudinaryStorageClient
from ..services.upload_intake import UploadIntake
from ..services.upload_pipeline import UploadPipeline


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_image_transcoder() -> ImageTranscoder:
    return ImageTranscoder(settings=get_settings())


@lru_cache()
def get_storage_client() -> CloudinaryStorageClient:
    settings = get_settings()
    return CloudinaryStorageClient(
        credentials=settings.storage_credentials,
        api_url=settings.CLOUDINARY_API_URL,
        timeout=settings.UPLOAD_TIMEOUT,
    )


@lru_cache()
def get_upload_intake() -> UploadIntake:
    return UploadIntake(settings=get_settings())


def get_upload_pipeline() -> UploadPipeline:
    return UploadPipeline(
        transcoder=get_image_transcoder(),
        storage_client=get_storage_client(),
        settings=get_settings(),
    )
