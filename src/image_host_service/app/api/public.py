import platform
import sys
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from ..core.config import Settings
from ..core.dependencies import (
    get_settings_dependency,
    get_storage_client,
    get_upload_intake,
    get_upload_pipeline,
)
from ..schemas import (
    CloudinaryStatus,
    DeleteResponse,
    EnvironmentInfo,
    HealthResponse,
    UploadResponse,
)
from ..services.storage_client import CloudinaryStorageClient
from ..services.upload_intake import UploadIntake
from ..services.upload_pipeline import UploadPipeline

try:
    import resource
except ImportError:  # Windows
    resource = None

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_images(
    request: Request,
    intake: UploadIntake = Depends(get_upload_intake),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
):
    """
    Optimize up to five images and upload them to Cloudinary.

    The multipart field ``images`` carries the files (JPEG, PNG, GIF, WEBP),
    10MB each at most.

    Returns:
        UploadResponse listing stored images and per-file errors. A failing
        file does not fail the request; clients must inspect ``errors``.

    Raises:
        ClientInputError: No files, too many files, file too large or bad type
    """
    files = await intake.read_request(request)
    logger.info(f"Upload request received: {len(files)} file(s)")

    batch = await pipeline.process_batch(files)

    return UploadResponse.from_batch(batch)


@router.delete("/delete/{public_id:path}", response_model=DeleteResponse)
async def delete_image(
    public_id: str,
    storage_client: CloudinaryStorageClient = Depends(get_storage_client),
):
    """
    Delete a hosted image by its Cloudinary identifier.

    Folder-prefixed identifiers such as ``gallery/img_...`` are accepted.
    Unknown identifiers are not an error: the provider result reads ``not found``.
    """
    try:
        deletion = await storage_client.delete(public_id)

    except Exception as e:
        logger.error(f"Error deleting image {public_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if not deletion.found:
        logger.warning(f"Image {public_id} not found on Cloudinary: {deletion.result}")

    return DeleteResponse(message="Image supprimée", result=deletion.raw)


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings_dependency)):
    """Diagnostic snapshot of the process and Cloudinary configuration."""
    return HealthResponse(
        status="OK ✅",
        timestamp=datetime.now(timezone.utc),
        environment=EnvironmentInfo(
            python=platform.python_version(),
            platform=sys.platform,
            memory=_memory_usage(),
            cloudinary=CloudinaryStatus(
                configured=settings.cloudinary_configured,
                cloud_name=settings.CLOUDINARY_CLOUD_NAME or "non configuré",
            ),
        ),
    )


def _memory_usage() -> dict[str, int]:
    usage = {"allocated_blocks": sys.getallocatedblocks()}
    if resource is not None:
        usage["max_rss"] = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return usage
