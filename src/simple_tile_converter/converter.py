"""Core conversion logic for the simple tile converter."""

# Scan order
# - Metatiles (width x height) are visited left to right, top to bottom.
# - Inside a metatile, hardware tiles (sub_width x sub_height) are visited the
#   same way. Each row of hardware tiles inside a metatile starts a new map row.
#
# Outputs
# File        | Layout
# ------------|---------------------------------------------------------------
# Tiles       | 4bpp, (sub_width * sub_height) / 2 bytes per unique tile
# Palette     | little endian RGB555 word per color, optionally without index 0
# Map         | 1 byte per hardware tile visited, atlas index 0-255

from __future__ import annotations

import warnings
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .errors import ConversionError, SourceError, TransparencyAliasWarning
from .palette import Color, Palette, to_rgb
from .source import EDGE_MODES, ImageSource
from .tiles import TileAtlas, TileMap, build_tile


@dataclass(frozen=True)
class Config:
    """Options for splicing images into tiles.

    A single config can be used for multiple images.
    """

    width: int = 8  # metatile size within the input image
    height: int = 8
    sub_width: int = 8  # hardware tile size
    sub_height: int = 8
    transparency_color: Optional[Color] = None  # reserves palette 0 when set
    alpha_threshold: int = 128
    edge_mode: str = "error"  # error, pad

    def __post_init__(self) -> None:
        for name in ("width", "height", "sub_width", "sub_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConversionError(f"{name} must be a positive integer, got {value!r}")
        threshold = self.alpha_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, int) or not 0 <= threshold <= 255:
            raise ConversionError(f"Alpha threshold must be an integer between 0 and 255, got {threshold!r}")
        if self.edge_mode not in EDGE_MODES:
            raise ConversionError(f"Unknown edge mode: {self.edge_mode}")
        if self.transparency_color is not None:
            object.__setattr__(self, "transparency_color", to_rgb(self.transparency_color))

    def with_tilesize(self, width: int, height: int) -> "Config":
        return replace(self, width=width, height=height)

    def with_subtile_size(self, width: int, height: int) -> "Config":
        return replace(self, sub_width=width, sub_height=height)

    def with_transparency_color(self, *color: int) -> "Config":
        """Set a transparency color as ``r, g, b`` or ``r, g, b, a``.

        This reserves palette 0 even if no pixel uses the color.
        """
        return replace(self, transparency_color=to_rgb(color))

    def without_transparency_color(self) -> "Config":
        return replace(self, transparency_color=None)

    def with_alpha_threshold(self, threshold: int) -> "Config":
        return replace(self, alpha_threshold=threshold)

    def with_edge_mode(self, mode: str) -> "Config":
        return replace(self, edge_mode=mode)


class ConversionResult(NamedTuple):
    palette: Palette
    atlas: TileAtlas
    tilemap: TileMap


def convert_image(
    image: Union[Image.Image, ImageSource], config: Config | None = None
) -> ConversionResult:
    """Convert an image into a palette, a deduplicated atlas and a tile map.

    ``config.edge_mode`` applies to every input, including a prepared
    :class:`ImageSource`.
    """

    config = config or Config()
    if isinstance(image, ImageSource):
        image = image.image
    source = ImageSource(image, config.edge_mode)

    palette = Palette()
    atlas = TileAtlas()
    tilemap = TileMap()
    if config.transparency_color is not None:
        palette.insert(config.transparency_color)

    transparent_pixels = 0
    for tile_y in range(0, source.height, config.height):
        for tile_x in range(0, source.width, config.width):
            for subtile_y in range(tile_y, tile_y + config.height, config.sub_height):
                tilemap.start_row()
                for subtile_x in range(tile_x, tile_x + config.width, config.sub_width):
                    pixels = source.region(subtile_x, subtile_y, config.sub_width, config.sub_height)
                    tile, transparent = build_tile(pixels, palette, config.alpha_threshold)
                    transparent_pixels += transparent
                    tilemap.append(atlas.update(tile))

    if transparent_pixels and config.transparency_color is None:
        if len(palette):
            target = f"palette 0 {palette[0]}"
        else:
            target = "palette 0, which has no color (the palette is empty)"
        warnings.warn(
            f"{transparent_pixels} pixels below alpha {config.alpha_threshold} were "
            f"mapped to {target} without a transparency color",
            TransparencyAliasWarning,
            stacklevel=2,
        )

    return ConversionResult(palette, atlas, tilemap)


def convert_png(path: str | Path, config: Config | None = None) -> ConversionResult:
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            return convert_image(img, config)
    except FileNotFoundError as exc:
        raise SourceError(f"Input file not found: {path}") from exc
    except UnidentifiedImageError as exc:
        raise SourceError(f"Failed to decode image: {path}") from exc
    except OSError as exc:
        raise SourceError(f"Failed to read image: {path}") from exc


def write_outputs(
    result: ConversionResult,
    tiles_path: str | Path,
    palette_path: str | Path,
    map_path: str | Path | None = None,
    skip_first_color: bool = False,
) -> Dict[Path, int]:
    """Write the atlas, palette and (optionally) map files in that order.

    A failure stops at the offending file; files and bytes written before it
    are left on disk.
    """

    written: Dict[Path, int] = {}
    targets: List[Tuple[Path, Callable[[BinaryIO], int]]] = [
        (Path(tiles_path), result.atlas.write_4bpp),
        (Path(palette_path), lambda sink: result.palette.write_rgb555(sink, skip_first_color)),
    ]
    if map_path is not None:
        targets.append((Path(map_path), result.tilemap.write_8bit))

    for target, writer in targets:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as sink:
            written[target] = writer(sink)
    return written
