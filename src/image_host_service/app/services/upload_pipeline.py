from loguru import logger

from ..core.config import Settings
from .domain import (
    FileOutcome,
    NamingOptions,
    ProcessingError,
    UploadBatchResult,
    UploadedFile,
)
from .image_transcoder import ImageTranscoder
from .storage_client import CloudinaryStorageClient, generate_public_id


class UploadPipeline:
    def __init__(
        self,
        transcoder: ImageTranscoder | None = None,
        storage_client: CloudinaryStorageClient | None = None,
        settings: Settings | None = None,
    ):
        from ..core.config import get_settings

        self.settings = settings or get_settings()

        if transcoder is None:
            raise ValueError("ImageTranscoder must be provided via dependency injection")
        if storage_client is None:
            raise ValueError(
                "CloudinaryStorageClient must be provided via dependency injection"
            )

        self.transcoder = transcoder
        self.storage_client = storage_client

    async def process_batch(self, files: list[UploadedFile]) -> UploadBatchResult:
        """
        Transcode and upload each file in order, one at a time.

        A failing file is recorded in ``errors`` and never stops the batch, so every
        input ends up in exactly one of ``images`` or ``errors``.
        """
        logger.info(f"Upload batch started: {len(files)} file(s)")

        result = UploadBatchResult()
        for index, uploaded in enumerate(files, start=1):
            logger.info(f"Processing file {index}: {uploaded.original_filename}")
            result.add(await self._process_file(uploaded))

        logger.info(
            f"Upload batch finished: {result.total} processed, "
            f"{len(result.images)} stored, {len(result.errors)} failed"
        )
        return result

    async def _process_file(self, uploaded: UploadedFile) -> FileOutcome:
        name = uploaded.original_filename

        try:
            transcoded = await self.transcoder.transcode_async(uploaded.data)
            logger.info(f"File optimized: {uploaded.size} -> {transcoded.size} bytes")

            descriptor = await self.storage_client.store(
                transcoded.data,
                NamingOptions(
                    public_id=generate_public_id(),
                    folder=self.settings.CLOUDINARY_FOLDER,
                ),
            )
            descriptor.original_filename = name
            return descriptor

        except Exception as e:
            logger.error(f"Failed to process file {name}: {e}")
            return ProcessingError(
                message=f"Erreur traitement {name}: {str(e)}", original_filename=name
            )
