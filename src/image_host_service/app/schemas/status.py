from datetime import datetime

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    message: str
    timestamp: datetime
    cloudinary: bool = Field(..., description="Whether a cloud name is configured")


class CloudinaryStatus(BaseModel):
    configured: bool
    cloud_name: str


class EnvironmentInfo(BaseModel):
    python: str = Field(..., description="Interpreter version")
    platform: str = Field(..., description="Operating system")
    memory: dict[str, int] = Field(..., description="Process memory usage")
    cloudinary: CloudinaryStatus


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: EnvironmentInfo
