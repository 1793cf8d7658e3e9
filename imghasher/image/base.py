"""
Base Image Module - Abstract raster handle consumed by the hashers.

Concrete adapters (Pillow today) must inherit from BaseImage and
implement the four accessors below. The hashers never decode files
themselves; they only read dimensions, sample pixels and ask the
adapter for a resampled copy.
"""

from abc import ABC, abstractmethod
from typing import Tuple

RGB = Tuple[int, int, int]


class BaseImage(ABC):
    """
    Abstract decoded raster.

    Concrete implementations must provide:
    - width() / height(): dimensions in pixels
    - pixel_at(): 8-bit (r, g, b) triple at a coordinate
    - resample(): a new image scaled to the requested size
    """

    @abstractmethod
    def width(self) -> int:
        pass

    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def pixel_at(self, x: int, y: int) -> RGB:
        """
        Return the pixel at column x, row y.

        Args:
            x: Column index, 0 is the left edge
            y: Row index, 0 is the top edge

        Returns:
            Tuple of (r, g, b), each 0..255
        """
        pass

    @abstractmethod
    def resample(self, new_width: int, new_height: int) -> "BaseImage":
        """
        Return a copy scaled to new_width x new_height.

        The source image is left untouched.
        """
        pass

    @property
    def size(self) -> Tuple[int, int]:
        return self.width(), self.height()

    def __repr__(self) -> str:
        try:
            return f"<{type(self).__name__} {self.width()}x{self.height()}>"
        except Exception:
            return f"<{type(self).__name__} (unreadable)>"
