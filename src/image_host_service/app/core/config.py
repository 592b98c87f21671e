from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class StorageCredentials:
    cloud_name: str | None = None
    api_key: str | None = None
    api_secret: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


def get_project_root() -> Path:
    current_path = Path(__file__).parent
    while current_path != current_path.parent:
        if (current_path / "pyproject.toml").exists():
            return current_path
        current_path = current_path.parent
    return Path(".")


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = Field(default="Image Host Service")
    DEBUG: bool = Field(default=False)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # CORS Settings
    ALLOWED_ORIGINS: list[str] = Field(default=["*"])

    # Cloudinary Settings
    CLOUDINARY_CLOUD_NAME: str | None = Field(default=None)
    CLOUDINARY_API_KEY: str | None = Field(default=None)
    CLOUDINARY_API_SECRET: str | None = Field(default=None)
    CLOUDINARY_API_URL: str = Field(default="https://api.cloudinary.com/v1_1")
    CLOUDINARY_FOLDER: str | None = Field(default=None)
    UPLOAD_TIMEOUT: float | None = Field(default=None)  # no timeout when unset

    # Upload Limits
    MAX_FILE_SIZE: int = Field(default=10 * 1024 * 1024)  # 10MB
    MAX_FILES: int = Field(default=5)
    ALLOWED_MIME_TYPES: list[str] = Field(
        default=["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
    )

    # Image Processing Settings
    MAX_IMAGE_WIDTH: int = Field(default=1920)
    MAX_IMAGE_HEIGHT: int = Field(default=1080)
    JPEG_QUALITY: int = Field(default=85)

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str | None = Field(default=None)

    model_config = {
        "env_file": get_project_root() / ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def storage_credentials(self) -> StorageCredentials:
        """Provider credentials as an immutable value."""
        return StorageCredentials(
            cloud_name=self.CLOUDINARY_CLOUD_NAME,
            api_key=self.CLOUDINARY_API_KEY,
            api_secret=self.CLOUDINARY_API_SECRET,
        )

    @property
    def cloudinary_configured(self) -> bool:
        # Mirrors the liveness check: only the cloud name is inspected
        return bool(self.CLOUDINARY_CLOUD_NAME)

    @property
    def absolute_log_file(self) -> str | None:
        if not self.LOG_FILE:
            return None
        return str(get_project_root() / self.LOG_FILE)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
