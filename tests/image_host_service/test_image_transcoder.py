import io

import pytest
from PIL import Image

from src.image_host_service.app.services.domain import TranscodeError
from src.image_host_service.app.services.image_transcoder import ImageTranscoder


def decode(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class TestImageTranscoder:
    def test_small_image_keeps_dimensions(self, transcoder, small_jpeg_bytes):
        result = transcoder.transcode(small_jpeg_bytes)

        output = decode(result.data)
        assert output.format == "JPEG"
        assert output.size == (500, 300)
        assert (result.width, result.height) == (500, 300)
        assert result.size == len(result.data)

    def test_large_png_fits_inside_bounds(self, transcoder, large_png_bytes):
        result = transcoder.transcode(large_png_bytes)

        output = decode(result.data)
        assert output.format == "JPEG"
        assert output.width <= 1920
        assert output.height <= 1080
        assert output.size == (1440, 1080)

    def test_wide_image_bounded_by_width(self, transcoder):
        buffer = io.BytesIO()
        Image.new("RGB", (3840, 1000), color="white").save(buffer, format="PNG")

        result = transcoder.transcode(buffer.getvalue())

        assert (result.width, result.height) == (1920, 500)

    def test_output_is_progressive(self, transcoder, small_jpeg_bytes):
        output = decode(transcoder.transcode(small_jpeg_bytes).data)
        assert output.info.get("progressive") == 1

    def test_transcoding_is_deterministic(self, transcoder, large_png_bytes):
        first = transcoder.transcode(large_png_bytes)
        second = transcoder.transcode(large_png_bytes)

        assert first.data == second.data

    def test_transparency_flattened_onto_white(self, transcoder, transparent_png_bytes):
        output = decode(transcoder.transcode(transparent_png_bytes).data)

        assert output.mode == "RGB"
        assert all(channel >= 250 for channel in output.getpixel((10, 10)))

    def test_gif_and_webp_are_converted(self, transcoder, gif_bytes, webp_bytes):
        for data in (gif_bytes, webp_bytes):
            output = decode(transcoder.transcode(data).data)
            assert output.format == "JPEG"

    def test_grayscale_image_supported(self, transcoder):
        buffer = io.BytesIO()
        Image.new("L", (30, 30), color=128).save(buffer, format="PNG")

        output = decode(transcoder.transcode(buffer.getvalue()).data)

        assert output.format == "JPEG"
        assert output.size == (30, 30)

    def test_corrupt_data_raises(self, transcoder, corrupt_image_bytes):
        with pytest.raises(TranscodeError) as exc_info:
            transcoder.transcode(corrupt_image_bytes)

        assert "Invalid image file" in str(exc_info.value)

    def test_empty_data_raises(self, transcoder):
        with pytest.raises(TranscodeError):
            transcoder.transcode(b"")

    def test_custom_bounds_from_settings(self, test_settings, large_png_bytes):
        test_settings.MAX_IMAGE_WIDTH = 400
        test_settings.MAX_IMAGE_HEIGHT = 400
        transcoder = ImageTranscoder(settings=test_settings)

        result = transcoder.transcode(large_png_bytes)

        assert (result.width, result.height) == (400, 300)

    @pytest.mark.asyncio
    async def test_transcode_async(self, transcoder, small_jpeg_bytes):
        result = await transcoder.transcode_async(small_jpeg_bytes)

        assert result.data == transcoder.transcode(small_jpeg_bytes).data
