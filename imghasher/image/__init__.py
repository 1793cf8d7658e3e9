"""
Image adapters - the raster handles the hashers read from.

BaseImage is the abstract contract; PILImage adapts Pillow images and
as_image() turns paths, bytes or PIL images into a BaseImage.
"""

from .base import BaseImage
from .pil_image import PILImage, as_image, is_image_source, resolve_resample

__all__ = ['BaseImage', 'PILImage', 'as_image', 'is_image_source', 'resolve_resample']
