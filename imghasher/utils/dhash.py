"""
Perceptual hashing using dHash (difference hash).

dHash is a simple, fast perceptual hash that detects near-duplicate images.
The image is shrunk to a 9x8 grid and each row yields 8 "darker than the
left neighbour" bits, for 64 bits in total.

Bit layout (must stay stable, stored hashes depend on it):
    rows top to bottom, columns left to right, column 0 of every row only
    seeds the comparison. The first comparison is the most significant bit,
    the last one is bit 0.

Based on http://www.hackerfactor.com/blog/index.php?/archives/529-Kind-of-Like-That.html
"""

import sys
import logging
from typing import Callable, List, Optional

from imghasher.errors import InvalidImageError, UnsupportedPlatformError
from imghasher.image.base import BaseImage, RGB
from imghasher.image.pil_image import ImageSource, as_image
from imghasher.schema import ChannelHashSet

logger = logging.getLogger(__name__)

RGB_MAX = 255

# Image scaling dimensions for dHash (one extra column → 8 comparisons per row)
DHASH_WIDTH = 9
DHASH_HEIGHT = 8

HASH_BITS = (DHASH_WIDTH - 1) * DHASH_HEIGHT
HASH_MASK = (1 << HASH_BITS) - 1

# ITU-R BT.709 relative luminance coefficients
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

# Native integer width of the interpreter (Py_ssize_t), e.g. 64 on x86_64
NATIVE_INT_BITS = sys.maxsize.bit_length() + 1


def luminance(pixel: RGB) -> float:
    """Relative luminance of an 8-bit (r, g, b) pixel, in [0, 1]."""
    r, g, b = pixel
    return LUMA_R * (r / RGB_MAX) + LUMA_G * (g / RGB_MAX) + LUMA_B * (b / RGB_MAX)


def validate_image(image: Optional[BaseImage]) -> BaseImage:
    """
    Ensure the image can report positive dimensions.

    Raises:
        InvalidImageError: None, unreadable, or zero/negative size
    """
    if image is None:
        raise InvalidImageError()
    try:
        width, height = image.width(), image.height()
    except Exception as e:
        raise InvalidImageError(f"Invalid image: cannot read dimensions ({e})") from e
    if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
        raise InvalidImageError(f"Invalid image: bad dimensions {width!r}x{height!r}")
    return image


def ensure_64bit_support():
    """Refuse to hash on interpreters whose native int is narrower than 64 bits."""
    if NATIVE_INT_BITS < HASH_BITS:
        raise UnsupportedPlatformError()


def _prepare(image: ImageSource) -> BaseImage:
    """Validate, check the platform, then shrink to the dHash grid."""
    img = validate_image(as_image(image))
    ensure_64bit_support()
    logger.debug(f"Resampling {img.width()}x{img.height()} -> {DHASH_WIDTH}x{DHASH_HEIGHT}")
    return img.resample(DHASH_WIDTH, DHASH_HEIGHT)


def _pack_rows(grid: BaseImage, extractors: List[Callable[[RGB], float]]) -> List[int]:
    """
    Scan the grid once and build one hash per extractor.

    Each extractor maps a pixel to the value being compared (luminance,
    or a single channel).
    """
    hashes = [0] * len(extractors)
    for y in range(DHASH_HEIGHT):
        last = None
        for x in range(DHASH_WIDTH):
            values = [extract(grid.pixel_at(x, y)) for extract in extractors]
            # Column 0 is only the baseline for the row
            if x > 0:
                for i, value in enumerate(values):
                    hashes[i] = (hashes[i] << 1) | (1 if value < last[i] else 0)
            last = values
    return hashes


def compute_grayscale_hash(image: ImageSource) -> int:
    """
    Compute the 64-bit luminance dHash for an image.

    Args:
        image: BaseImage, PIL Image, file path or encoded image bytes

    Returns:
        Hash in [0, 2**64 - 1]

    Raises:
        InvalidImageError: Image is None, unreadable or has a zero dimension
        UnsupportedPlatformError: Interpreter int narrower than 64 bits

    Example:
        >>> from PIL import Image
        >>> h1 = compute_grayscale_hash(Image.open('photo.jpg'))
        >>> h2 = compute_grayscale_hash('photo_resized.jpg')
        >>> hamming_distance(h1, h2) <= 10  # near-duplicate
    """
    grid = _prepare(image)
    (value,) = _pack_rows(grid, [luminance])
    logger.debug(f"dHash={value:016x}")
    return value


def compute_channel_hashes(image: ImageSource) -> ChannelHashSet:
    """
    Compute independent 64-bit dHashes for the R, G and B channels.

    Same grid and bit order as compute_grayscale_hash(), but each channel
    compares its raw 0..255 values instead of blended luminance.

    Raises:
        InvalidImageError, UnsupportedPlatformError: as compute_grayscale_hash()
    """
    grid = _prepare(image)
    r, g, b = _pack_rows(grid, [
        lambda p: p[0],
        lambda p: p[1],
        lambda p: p[2],
    ])
    logger.debug(f"dHashRGB r={r:016x} g={g:016x} b={b:016x}")
    return ChannelHashSet(r=r, g=g, b=b)


# Short names matching the usual dHash vocabulary
dhash = compute_grayscale_hash
dhash_rgb = compute_channel_hashes
