"""
Pillow adapter for the BaseImage interface.

Wraps a PIL.Image.Image (any mode, converted to RGB once) and provides
helpers to turn paths, encoded bytes or PIL images into a BaseImage.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from imghasher.errors import InvalidImageError
from imghasher.image.base import BaseImage, RGB

logger = logging.getLogger(__name__)

DEFAULT_RESAMPLE = "box"

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}

ImageSource = Union[BaseImage, Image.Image, str, Path, bytes, bytearray]


def resolve_resample(name: Optional[str] = None) -> Image.Resampling:
    """
    Map a filter name to a Pillow resampling constant.

    Args:
        name: Filter name (case-insensitive). None reads
              hashing.resample from the config.

    Raises:
        ValueError: Unknown filter name
    """
    if name is None:
        from imghasher.utils.config import get_config
        name = get_config().get("hashing.resample", DEFAULT_RESAMPLE)

    key = str(name).strip().lower()
    if key not in RESAMPLE_FILTERS:
        raise ValueError(
            f"Unknown resample filter '{name}' "
            f"(expected one of: {', '.join(sorted(RESAMPLE_FILTERS))})"
        )
    return RESAMPLE_FILTERS[key]


class PILImage(BaseImage):
    """BaseImage backed by an RGB PIL image."""

    def __init__(self, img: Image.Image, resample: Optional[str] = None):
        self._img = img if img.mode == "RGB" else img.convert("RGB")
        self._resample = resample

    @property
    def pil(self) -> Image.Image:
        return self._img

    def width(self) -> int:
        return self._img.width

    def height(self) -> int:
        return self._img.height

    def pixel_at(self, x: int, y: int) -> RGB:
        r, g, b = self._img.getpixel((x, y))
        return r, g, b

    def resample(self, new_width: int, new_height: int) -> "PILImage":
        resized = self._img.resize((new_width, new_height), resolve_resample(self._resample))
        return PILImage(resized, resample=self._resample)


def _decode(fp, label: str, resample: Optional[str]) -> PILImage:
    try:
        with Image.open(fp) as img:
            rgb = img.convert("RGB")
    except (OSError, Image.DecompressionBombError) as e:
        raise InvalidImageError(f"Invalid image: {label} ({e})") from e
    logger.debug(f"Decoded {label}: {rgb.width}x{rgb.height}")
    return PILImage(rgb, resample=resample)


def as_image(source: ImageSource, resample: Optional[str] = None) -> BaseImage:
    """
    Normalize any supported image input into a BaseImage.

    Args:
        source: BaseImage, PIL image, file path or encoded image bytes
        resample: Filter name used when the result is resampled

    Returns:
        BaseImage ready for hashing

    Raises:
        InvalidImageError: None, an unsupported type, or undecodable data
    """
    if source is None:
        raise InvalidImageError()
    if isinstance(source, BaseImage):
        return source
    if isinstance(source, Image.Image):
        return PILImage(source, resample=resample)
    if isinstance(source, (str, Path)):
        return _decode(source, str(source), resample)
    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise InvalidImageError("Invalid image: empty buffer")
        return _decode(io.BytesIO(source), f"<{len(source)} bytes>", resample)
    raise InvalidImageError(f"Invalid image: unsupported type {type(source).__name__}")


def is_image_source(value) -> bool:
    """True if as_image() would attempt to handle this value."""
    return isinstance(value, (BaseImage, Image.Image, str, Path, bytes, bytearray))
