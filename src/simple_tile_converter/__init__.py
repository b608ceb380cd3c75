"""Simple image to 4bpp tile converter.

This package splits an image into hardware tiles, deduplicates them and
encodes a 4bpp tile atlas, an RGB555 palette and an 8-bit tile map. It can be
invoked through the CLI (``python -m simple_tile_converter``) or imported to
convert images in memory.
"""

from .converter import (
    Config,
    ConversionResult,
    convert_image,
    convert_png,
    write_outputs,
)
from .errors import (
    ConversionError,
    FormatOverflowError,
    SourceError,
    TransparencyAliasWarning,
)
from .palette import Color, Palette, encode_rgb555, parse_color
from .source import ImageSource
from .tiles import Tile, TileAtlas, TileMap, build_tile

__all__ = [
    "Color",
    "Config",
    "ConversionError",
    "ConversionResult",
    "FormatOverflowError",
    "ImageSource",
    "Palette",
    "SourceError",
    "Tile",
    "TileAtlas",
    "TileMap",
    "TransparencyAliasWarning",
    "build_tile",
    "convert_image",
    "convert_png",
    "encode_rgb555",
    "parse_color",
    "write_outputs",
]
