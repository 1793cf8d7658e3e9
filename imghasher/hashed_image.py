"""
HashedImage - an image paired with its lazily computed dHash.

Typical use is holding a reference image and comparing many candidates
against it:

    ref = HashedImage('reference.png')
    ref.compare_to('candidate.jpg')      # raw image
    ref.compare_to(other_hashed_image)   # another HashedImage
    ref.compare_to(9114861776524122264)  # stored hash

The cache is a plain attribute with no lock. Two threads racing on the
first dhash() both compute the same value and the last write wins.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from imghasher.errors import InvalidImageOrHashError
from imghasher.image.base import BaseImage
from imghasher.image.pil_image import ImageSource, as_image, is_image_source
from imghasher.schema import ChannelHashSet
from imghasher.utils.dhash import compute_channel_hashes, compute_grayscale_hash, validate_image
from imghasher.utils.hamming import hamming_distance

logger = logging.getLogger(__name__)


class HashedImage:
    """
    Image handle plus cached grayscale (and RGB) dHash.

    The image is validated on construction, so an invalid image fails
    here and not on the first comparison.
    """

    def __init__(self, image: ImageSource, resample: Optional[str] = None):
        self._img: BaseImage = validate_image(as_image(image, resample=resample))
        self._resample = resample
        self._dhash: Optional[int] = None
        self._dhash_rgb: Optional[ChannelHashSet] = None

    @property
    def image(self) -> BaseImage:
        return self._img

    @property
    def resample(self) -> Optional[str]:
        return self._resample

    def dhash(self) -> int:
        """Grayscale dHash, computed on first call."""
        if self._dhash is None:
            self._dhash = compute_grayscale_hash(self._img)
        return self._dhash

    def dhash_rgb(self) -> ChannelHashSet:
        """Per-channel dHashes, computed on first call."""
        if self._dhash_rgb is None:
            self._dhash_rgb = compute_channel_hashes(self._img)
        return self._dhash_rgb

    def compare_to(self, other: Union["HashedImage", int, ImageSource]) -> int:
        """
        Hamming distance between this image and another image or hash.

        Args:
            other: HashedImage, numeric hash, or anything as_image() accepts

        Returns:
            Distance in bits (0-64)

        Raises:
            InvalidImageOrHashError: other is none of the above
            InvalidImageError: other is an image source that cannot be read
        """
        operand = classify_operand(other, resample=self._resample)
        return hamming_distance(self.dhash(), operand.resolve())

    def __sub__(self, other) -> int:
        return self.compare_to(other)

    def __repr__(self) -> str:
        cached = f"{self._dhash:016x}" if self._dhash is not None else "pending"
        return f"<HashedImage {self._img!r} dhash={cached}>"


# ── comparison operands ─────────────────────────────

@dataclass(frozen=True)
class HashedImageOperand:
    hashed: HashedImage

    def resolve(self) -> int:
        return self.hashed.dhash()


@dataclass(frozen=True)
class HashOperand:
    value: int

    def resolve(self) -> int:
        return self.value


@dataclass(frozen=True)
class ImageOperand:
    source: ImageSource
    resample: Optional[str] = None

    def resolve(self) -> int:
        # Transient wrapper, discarded after hashing
        return HashedImage(self.source, resample=self.resample).dhash()


Operand = Union[HashedImageOperand, HashOperand, ImageOperand]


def classify_operand(value, resample: Optional[str] = None) -> Operand:
    """
    Sort a compare_to() argument into one of the three operand kinds.

    Raw images are hashed with the given resample filter, so they match
    the HashedImage they are compared against.

    Raises:
        InvalidImageOrHashError: value is not a hashed image, hash, or image
    """
    if isinstance(value, HashedImage):
        return HashedImageOperand(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return HashOperand(value)
    if value is not None and is_image_source(value):
        return ImageOperand(value, resample)
    logger.debug(f"Rejected comparison operand of type {type(value).__name__}")
    raise InvalidImageOrHashError()
