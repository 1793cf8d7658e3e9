"""Shared fixtures: synthetic bar images and an isolated config."""

import pytest
from PIL import Image

from imghasher.image.base import BaseImage
from imghasher.utils import config as config_module

WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
CYAN = (0, 255, 255)
GREEN = (0, 255, 0)
MAGENTA = (255, 0, 255)
RED = (255, 0, 0)
BLUE = (0, 0, 255)

# 9 columns, luminance falling from column 1 to column 7.
# Column 1 and column 8 repeat their neighbour, so those comparisons are ties.
BARS = [WHITE, WHITE, YELLOW, CYAN, GREEN, MAGENTA, RED, BLUE, BLUE]

BLOCK = 10


def make_grid_image(rows, block=BLOCK):
    """Build an RGB image from a 8x9 grid of colours, each cell block x block pixels."""
    img = Image.new("RGB", (9 * block, len(rows) * block))
    px = img.load()
    for gy, row in enumerate(rows):
        for gx, color in enumerate(row):
            for y in range(gy * block, (gy + 1) * block):
                for x in range(gx * block, (gx + 1) * block):
                    px[x, y] = color
    return img


@pytest.fixture
def bars_image():
    """Every row is BARS."""
    return make_grid_image([BARS] * 8)


@pytest.fixture
def split_bars_image():
    """Top four rows are BARS, bottom four rows are BARS reversed."""
    return make_grid_image([BARS] * 4 + [list(reversed(BARS))] * 4)


@pytest.fixture
def falling_gradient():
    """Brightness strictly falls left to right."""
    img = Image.new("RGB", (255, 40))
    px = img.load()
    for y in range(40):
        for x in range(255):
            v = 254 - x
            px[x, y] = (v, v, v)
    return img


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at an empty user-settings file and clear env overrides."""
    for key in ("IMGHASHER_RESAMPLE", "IMGHASHER_DUPLICATE_THRESHOLD", "IMGHASHER_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("IMGHASHER_USER_SETTINGS_PATH", str(tmp_path / "user-settings.yaml"))
    config_module.reset_config()
    yield
    config_module.reset_config()


class GridImage(BaseImage):
    """In-memory BaseImage that records how often it is resampled."""

    def __init__(self, pixels, width=None, height=None):
        self.pixels = pixels
        self._width = len(pixels[0]) if width is None else width
        self._height = len(pixels) if height is None else height
        self.resample_calls = 0

    def width(self):
        return self._width

    def height(self):
        return self._height

    def pixel_at(self, x, y):
        return self.pixels[y][x]

    def resample(self, new_width, new_height):
        self.resample_calls += 1
        assert (new_width, new_height) == (len(self.pixels[0]), len(self.pixels))
        return self


class BrokenImage(BaseImage):
    """Handle whose dimensions cannot be read."""

    resample_calls = 0

    def width(self):
        raise OSError("image is closed")

    def height(self):
        raise OSError("image is closed")

    def pixel_at(self, x, y):
        raise OSError("image is closed")

    def resample(self, new_width, new_height):
        self.resample_calls += 1
        raise OSError("image is closed")
