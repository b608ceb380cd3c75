"""Pixel access over a Pillow image with an explicit edge policy."""
from __future__ import annotations

from typing import List, Tuple

from PIL import Image

from .errors import ConversionError, SourceError

RGBA = Tuple[int, int, int, int]

EDGE_MODES = ("error", "pad")
TRANSPARENT_PIXEL: RGBA = (0, 0, 0, 0)


class ImageSource:
    """Read-only RGBA view of an image.

    Regions reaching past the right or bottom edge either raise
    :class:`SourceError` (``edge_mode="error"``) or read as fully transparent
    pixels (``edge_mode="pad"``).
    """

    def __init__(self, image: Image.Image, edge_mode: str = "error"):
        if edge_mode not in EDGE_MODES:
            raise ConversionError(f"Unknown edge mode: {edge_mode}")
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.edge_mode = edge_mode
        self._pixels = self.image.load()

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> RGBA:
        if not self.contains(x, y):
            if self.edge_mode == "pad":
                return TRANSPARENT_PIXEL
            raise SourceError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} image"
            )
        return self._pixels[x, y]

    def region(self, x: int, y: int, width: int, height: int) -> List[RGBA]:
        """Return the pixels of a rectangle in row-major order."""
        if self.edge_mode == "error" and (
            x < 0 or y < 0 or x + width > self.width or y + height > self.height
        ):
            raise SourceError(
                f"Region {width}x{height} at ({x}, {y}) exceeds the "
                f"{self.width}x{self.height} image. Use a size that divides the "
                "image evenly or edge mode 'pad'."
            )
        return [self.pixel(px, py) for py in range(y, y + height) for px in range(x, x + width)]
