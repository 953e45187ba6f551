"""Image resizing for gallery size variants."""

import io
from dataclasses import dataclass
from datetime import datetime

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import get_resize_quality
from ..error_handling import ImageProcessingError
from ..logging_config import get_logger, log_performance

logger = get_logger(__name__)

# Formats re-encoded as themselves; anything else becomes JPEG
PRESERVED_FORMATS = {"JPEG", "PNG", "WEBP", "GIF"}

FIT_COVER = "cover"
FIT_SCALE_DOWN = "scale-down"


@dataclass(frozen=True)
class ResizeSpec:
    """
    What a size variant should look like.

    ``cover`` crops to exactly width x height. ``scale-down`` shrinks to
    ``width`` keeping the aspect ratio and never enlarges.
    """

    fit: str
    width: int
    height: int | None = None


@dataclass
class ResizedImage:
    data: bytes
    content_type: str


class ImageResizer:
    """Capability that turns original bytes into a size variant."""

    def resize(self, image_data: bytes, content_type: str, spec: ResizeSpec) -> ResizedImage:
        raise NotImplementedError


class ImageProcessor(ImageResizer):
    """Pillow-backed resizer."""

    def __init__(self, quality: int | None = None) -> None:
        """
        Initialize the image processor.

        Args:
            quality: JPEG/WebP quality (defaults to RESIZE_QUALITY, then 85)
        """
        self.quality = quality or get_resize_quality()

    def resize(self, image_data: bytes, content_type: str, spec: ResizeSpec) -> ResizedImage:
        """
        Produce a size variant of an image.

        Args:
            image_data: Original image bytes
            content_type: Content type of the original
            spec: Target geometry

        Returns:
            ResizedImage; the original bytes when no resizing is needed

        Raises:
            ImageProcessingError: If the bytes cannot be decoded or re-encoded
        """
        start_time = datetime.now()

        try:
            with Image.open(io.BytesIO(image_data)) as source:
                source_format = source.format or ""
                image = ImageOps.exif_transpose(source)
                original_size = image.size

                if spec.fit == FIT_COVER:
                    target = (spec.width, spec.height or spec.width)
                    image = ImageOps.fit(image, target, Image.Resampling.LANCZOS)
                elif spec.fit == FIT_SCALE_DOWN:
                    if image.width <= spec.width:
                        return ResizedImage(data=image_data, content_type=content_type)
                    image = image.resize(self._scaled_size(image.size, spec.width), Image.Resampling.LANCZOS)
                else:
                    raise ValueError(f"Unknown fit mode: {spec.fit}")

                output_format = source_format if source_format in PRESERVED_FORMATS else "JPEG"
                if output_format == "JPEG" and image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")

                buffer = io.BytesIO()
                save_options: dict = {"optimize": True}
                if output_format in ("JPEG", "WEBP"):
                    save_options["quality"] = self.quality
                image.save(buffer, format=output_format, **save_options)
                resized = buffer.getvalue()

        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageProcessingError(
                f"Failed to resize image: {e}",
                code="resize_failed",
                details={"fit": spec.fit, "width": spec.width, "original_file_size": len(image_data)},
                original_exception=e,
            ) from e

        log_performance(
            "resize_image",
            (datetime.now() - start_time).total_seconds(),
            fit=spec.fit,
            original_size=original_size,
            resized_size=image.size,
            original_file_size=len(image_data),
            resized_file_size=len(resized),
        )
        return ResizedImage(data=resized, content_type=Image.MIME.get(output_format, "image/jpeg"))

    @staticmethod
    def _scaled_size(original_size: tuple[int, int], max_width: int) -> tuple[int, int]:
        """Size with the given width and the original aspect ratio."""
        original_width, original_height = original_size
        scale_ratio = max_width / original_width
        return (max_width, max(1, int(original_height * scale_ratio)))


_image_processor: ImageProcessor | None = None


def get_image_processor() -> ImageProcessor:
    """Get the global image processor instance."""
    global _image_processor
    if _image_processor is None:
        _image_processor = ImageProcessor()
    return _image_processor
