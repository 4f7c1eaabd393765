"""Image compression service for the promptgallery application."""

import io
from datetime import datetime

from PIL import Image, ImageOps, UnidentifiedImageError

from ..error_handling import DecodeError, EncodeError, ValidationError
from ..logging_config import get_logger, log_performance

try:
    from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

    register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

logger = get_logger(__name__)

DEFAULT_QUALITY = 0.5
DEFAULT_MAX_WIDTH = 1920
JPEG_CONTENT_TYPE = "image/jpeg"


def calculate_target_size(original_size: tuple[int, int], max_width: int) -> tuple[int, int]:
    """
    Calculate the output size for a width-bounded downscale.

    Images no wider than ``max_width`` keep their size. Wider images are scaled
    so the width equals ``max_width`` and the height follows the aspect ratio,
    rounded to the nearest pixel.

    Args:
        original_size: Original image size as (width, height)
        max_width: Maximum allowed width in pixels

    Returns:
        tuple: Target size as (width, height)
    """
    width, height = original_size
    if width <= max_width:
        return (width, height)

    return (max_width, round(height * max_width / width))


def quality_to_pillow(quality: float) -> int:
    """
    Map a quality factor in (0, 1] to Pillow's 1-100 JPEG quality scale.

    Raises:
        ValidationError: If the factor lies outside (0, 1]
    """
    if not 0 < quality <= 1:
        raise ValidationError(
            f"Quality must be in (0, 1], got {quality}",
            code="invalid_quality",
            details={"quality": quality},
        )
    return max(1, min(100, round(quality * 100)))


class ImageCompressor:
    """Downscales and re-encodes images as JPEG before upload."""

    def compress(
        self,
        image_data: bytes,
        quality: float = DEFAULT_QUALITY,
        max_width: int = DEFAULT_MAX_WIDTH,
    ) -> bytes:
        """
        Compress an image into a width-bounded JPEG.

        Args:
            image_data: Raw image bytes in any format Pillow can decode
            quality: Quality factor in (0, 1]
            max_width: Maximum output width in pixels

        Returns:
            bytes: JPEG-encoded image data

        Raises:
            ValidationError: If quality or max_width are out of range
            DecodeError: If the input cannot be decoded as an image
            EncodeError: If the output canvas is empty or JPEG encoding fails
        """
        start_time = datetime.now()
        pillow_quality = quality_to_pillow(quality)
        if max_width <= 0:
            raise ValidationError(
                f"max_width must be positive, got {max_width}",
                code="invalid_max_width",
                details={"max_width": max_width},
            )

        image, original_format = self._decode(image_data)
        original_size = image.size
        target_size = calculate_target_size(original_size, max_width)

        if target_size[0] <= 0 or target_size[1] <= 0:
            raise EncodeError(
                f"Cannot encode an image of size {target_size[0]}x{target_size[1]}",
                details={"original_size": original_size, "target_size": target_size},
            )

        try:
            if image.mode != "RGB":
                image = image.convert("RGB")
            if target_size != original_size:
                image = image.resize(target_size, Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            image.save(buffer, format="JPEG", quality=pillow_quality, optimize=True)
            jpeg_data = buffer.getvalue()
        except (OSError, ValueError) as e:
            raise EncodeError(
                f"Failed to encode JPEG: {e}",
                details={"original_size": original_size, "target_size": target_size, "quality": pillow_quality},
                original_exception=e,
            ) from e

        duration = (datetime.now() - start_time).total_seconds()
        log_performance(
            "compress_image",
            duration,
            original_format=original_format,
            original_size=original_size,
            target_size=target_size,
            original_file_size=len(image_data),
            compressed_file_size=len(jpeg_data),
            quality=pillow_quality,
        )

        return jpeg_data

    def _decode(self, image_data: bytes) -> tuple[Image.Image, str | None]:
        """Decode bytes into an upright, fully loaded image and its source format."""
        if not image_data:
            raise DecodeError("Image data is empty", details={"file_size": 0})

        try:
            with Image.open(io.BytesIO(image_data)) as opened:
                source_format = opened.format
                # Match what a browser canvas draws: EXIF orientation applied
                image = ImageOps.exif_transpose(opened)
                image.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(
                f"Failed to decode image: {e}",
                details={"file_size": len(image_data), "heif_available": HEIF_AVAILABLE},
                original_exception=e,
            ) from e

        return image, source_format

    def get_image_info(self, image_data: bytes) -> dict:
        """
        Get basic image information.

        Args:
            image_data: Raw image data as bytes

        Returns:
            dict: format, mode, width and height of the image

        Raises:
            DecodeError: If the image cannot be read
        """
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                return {
                    "format": image.format,
                    "mode": image.mode,
                    "width": image.width,
                    "height": image.height,
                }
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError(
                f"Failed to get image info: {e}",
                details={"file_size": len(image_data)},
                original_exception=e,
            ) from e


image_compressor = ImageCompressor()


def get_image_compressor() -> ImageCompressor:
    """
    Get the global image compressor instance.

    Returns:
        ImageCompressor: Global image compressor instance
    """
    return image_compressor


def compress(image_data: bytes, quality: float = DEFAULT_QUALITY, max_width: int = DEFAULT_MAX_WIDTH) -> bytes:
    """Compress an image with the global compressor."""
    return image_compressor.compress(image_data, quality, max_width)
