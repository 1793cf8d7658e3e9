"""
imghasher - difference hash (dHash) fingerprints for near-duplicate images.

    from imghasher import compute_grayscale_hash, hamming_distance
    d = hamming_distance(compute_grayscale_hash('a.png'), compute_grayscale_hash('b.png'))
"""

from .errors import (
    ImgHasherError,
    InvalidImageError,
    InvalidImageOrHashError,
    UnsupportedPlatformError,
)
from .hashed_image import HashedImage
from .image import BaseImage, PILImage, as_image
from .schema import ChannelHashSet
from .utils.dhash import compute_channel_hashes, compute_grayscale_hash, dhash, dhash_rgb
from .utils.hamming import hamming_distance, is_duplicate, similarity

__version__ = "1.0.0"

__all__ = [
    'BaseImage',
    'ChannelHashSet',
    'HashedImage',
    'ImgHasherError',
    'InvalidImageError',
    'InvalidImageOrHashError',
    'PILImage',
    'UnsupportedPlatformError',
    'as_image',
    'compute_channel_hashes',
    'compute_grayscale_hash',
    'dhash',
    'dhash_rgb',
    'hamming_distance',
    'is_duplicate',
    'similarity',
]
