import asyncio
import io

from loguru import logger
from PIL import Image

from ..core.config import Settings
from .domain import TranscodedImage, TranscodeError


class ImageTranscoder:
    """Resize images to fit a bounding box and re-encode them as progressive JPEG."""

    def __init__(self, settings: Settings | None = None):
        from ..core.config import get_settings

        self.settings = settings or get_settings()
        self.max_size = (self.settings.MAX_IMAGE_WIDTH, self.settings.MAX_IMAGE_HEIGHT)
        self.quality = self.settings.JPEG_QUALITY

    def transcode(self, data: bytes) -> TranscodedImage:
        """
        Downscale an image so it fits inside the configured bounds and encode it as JPEG.

        Images smaller than the bounds keep their dimensions. Encoder parameters
        are fixed, so the same input always produces the same bytes.

        Args:
            data: Raw image bytes (JPEG, PNG, GIF or WEBP)

        Returns:
            TranscodedImage with the JPEG bytes and final dimensions

        Raises:
            TranscodeError: If the bytes cannot be decoded, resized or encoded
        """
        if not data:
            raise TranscodeError("Empty image data")

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                image = self._flatten(img)
                image.thumbnail(self.max_size, Image.Resampling.LANCZOS)

                buffer = io.BytesIO()
                image.save(
                    buffer,
                    format="JPEG",
                    quality=self.quality,
                    progressive=True,
                )

                return TranscodedImage(
                    data=buffer.getvalue(), width=image.width, height=image.height
                )

        except Exception as e:
            logger.error(f"Image transcoding failed: {e}")
            raise TranscodeError(f"Invalid image file: {str(e)}") from e

    async def transcode_async(self, data: bytes) -> TranscodedImage:
        return await asyncio.to_thread(self.transcode, data)

    def _flatten(self, img: Image.Image) -> Image.Image:
        # JPEG has no alpha channel: composite transparent pixels onto white
        if img.mode in ("RGBA", "LA") or (
            img.mode == "P" and "transparency" in img.info
        ):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background

        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")

        return img.copy()
