"""
Exception types raised by the hashing core.

All errors derive from ImgHasherError so callers at the boundary (CLI,
services) can catch one type. Each also derives from the closest builtin
so plain ``except ValueError`` style handlers keep working.
"""


class ImgHasherError(Exception):
    """Base class for imghasher errors."""


class InvalidImageError(ImgHasherError, ValueError):
    """Image handle is missing, unreadable, or has no usable dimensions."""

    def __init__(self, message: str = "Invalid image"):
        super().__init__(message)


class UnsupportedPlatformError(ImgHasherError, RuntimeError):
    """Host integer width cannot hold a full 64-bit hash."""

    def __init__(self, message: str = "dHash requires 64-bit integer support"):
        super().__init__(message)


class InvalidImageOrHashError(ImgHasherError, TypeError):
    """Comparison operand is neither an image nor a hash."""

    def __init__(self, message: str = "Invalid image or hash"):
        super().__init__(message)
