from fastapi import Request, UploadFile
from loguru import logger
from starlette.datastructures import UploadFile as FormFile
from starlette.exceptions import HTTPException

from ..core.config import Settings
from .domain import ClientInputError, UploadedFile

UPLOAD_FIELD = "images"


class UploadIntake:
    """Buffers multipart uploads, enforcing count, type and size limits."""

    def __init__(self, settings: Settings | None = None):
        from ..core.config import get_settings

        self.settings = settings or get_settings()

    async def read_request(self, request: Request) -> list[UploadedFile]:
        """
        Parse the multipart body of an upload request and buffer its images.

        The file count limit is handed to the multipart parser, so an
        oversized batch is rejected while parsing instead of after every
        part has been spooled.

        Raises:
            ClientInputError: Too many files, or any limit of ``read_uploads``
        """
        max_files = self.settings.MAX_FILES
        try:
            async with request.form(max_files=max_files) as form:
                uploads = [
                    item
                    for item in form.getlist(UPLOAD_FIELD)
                    if isinstance(item, FormFile)
                ]
                return await self.read_uploads(uploads)
        except HTTPException as e:
            if e.status_code == 400 and str(e.detail).startswith("Too many files"):
                raise ClientInputError(f"Trop de fichiers (max {max_files})") from e
            raise

    async def read_uploads(self, uploads: list[UploadFile] | None) -> list[UploadedFile]:
        if not uploads:
            raise ClientInputError("Aucun fichier reçu")

        if len(uploads) > self.settings.MAX_FILES:
            raise ClientInputError(f"Trop de fichiers (max {self.settings.MAX_FILES})")

        return [await self._read_upload(upload) for upload in uploads]

    async def _read_upload(self, upload: UploadFile) -> UploadedFile:
        filename = upload.filename or ""
        content_type = upload.content_type or ""

        logger.info(f"File received: {filename} {content_type}")

        if content_type not in self.settings.ALLOWED_MIME_TYPES:
            raise ClientInputError(f"Type de fichier non autorisé: {content_type}")

        max_size = self.settings.MAX_FILE_SIZE
        data = await upload.read(max_size + 1)
        if len(data) > max_size:
            raise ClientInputError(
                f"Fichier trop volumineux (max {max_size // (1024 * 1024)}MB)"
            )

        return UploadedFile(
            data=data, content_type=content_type, original_filename=filename
        )
