import io
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.image_host_service.app.core.config import Settings
from src.image_host_service.app.core.dependencies import (
    get_settings_dependency,
    get_storage_client,
    get_upload_intake,
    get_upload_pipeline,
)
from src.image_host_service.app.services.domain import (
    DeletionResult,
    NamingOptions,
    StoredImageDescriptor,
    UploadBatchResult,
)
from src.image_host_service.app.services.image_transcoder import ImageTranscoder
from src.image_host_service.app.services.storage_client import CloudinaryStorageClient
from src.image_host_service.app.services.upload_intake import UploadIntake
from src.image_host_service.app.services.upload_pipeline import UploadPipeline
from src.image_host_service.main import create_app


def encode_image(image: Image.Image, image_format: str) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="123456789012345",
        CLOUDINARY_API_SECRET="abcdefghijklmnop",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def unconfigured_settings():
    return Settings(_env_file=None, LOG_LEVEL="WARNING")


@pytest.fixture
def small_jpeg_bytes():
    return encode_image(Image.new("RGB", (500, 300), color="red"), "JPEG")


@pytest.fixture
def large_png_bytes():
    return encode_image(Image.new("RGB", (4000, 3000), color="blue"), "PNG")


@pytest.fixture
def transparent_png_bytes():
    return encode_image(Image.new("RGBA", (40, 20), color=(0, 0, 0, 0)), "PNG")


@pytest.fixture
def gif_bytes():
    return encode_image(Image.new("P", (64, 64), color=3), "GIF")


@pytest.fixture
def webp_bytes():
    return encode_image(Image.new("RGB", (120, 80), color="green"), "WEBP")


@pytest.fixture
def corrupt_image_bytes():
    return b"\xff\xd8\xff\xe0 definitely not a jpeg"


@pytest.fixture
def transcoder(test_settings):
    return ImageTranscoder(settings=test_settings)


async def fake_store(data: bytes, options: NamingOptions) -> StoredImageDescriptor:
    """Stand-in for Cloudinary that reports the dimensions of what it received."""
    with Image.open(io.BytesIO(data)) as img:
        return StoredImageDescriptor(
            url=f"https://res.cloudinary.com/demo/image/upload/{options.public_id}.jpg",
            public_id=options.public_id,
            size=len(data),
            width=img.width,
            height=img.height,
            format=img.format.lower(),
            original_filename="",
        )


@pytest.fixture
def mock_storage_client():
    mock = Mock(spec=CloudinaryStorageClient)
    mock.store = AsyncMock(side_effect=fake_store)
    mock.delete = AsyncMock(return_value=DeletionResult(raw={"result": "ok"}))
    return mock


@pytest.fixture
def upload_pipeline(transcoder, mock_storage_client, test_settings):
    return UploadPipeline(
        transcoder=transcoder,
        storage_client=mock_storage_client,
        settings=test_settings,
    )


@pytest.fixture
def mock_upload_pipeline():
    mock = Mock(spec=UploadPipeline)
    mock.process_batch = AsyncMock(return_value=UploadBatchResult())
    return mock


def build_client(settings, pipeline, storage_client) -> TestClient:
    app = create_app(settings)

    app.dependency_overrides[get_settings_dependency] = lambda: settings
    app.dependency_overrides[get_upload_intake] = lambda: UploadIntake(settings=settings)
    app.dependency_overrides[get_upload_pipeline] = lambda: pipeline
    app.dependency_overrides[get_storage_client] = lambda: storage_client

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def test_client(test_settings, upload_pipeline, mock_storage_client):
    return build_client(test_settings, upload_pipeline, mock_storage_client)


@pytest.fixture
def mocked_pipeline_client(test_settings, mock_upload_pipeline, mock_storage_client):
    return build_client(test_settings, mock_upload_pipeline, mock_storage_client)


@pytest.fixture
def client_factory():
    return build_client
