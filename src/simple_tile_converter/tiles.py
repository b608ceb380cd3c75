"""Tile building, atlas deduplication and tile map recording.

Output formats written here:

* 4bpp tiles: two palette indices per byte, ``low | high << 4``, consumed in
  each tile's row-major pixel order. Tiles are concatenated in atlas order.
* 8-bit map: one atlas index per byte, rows flattened in order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterable, Iterator, List, Sequence, Tuple

from .errors import ConversionError, FormatOverflowError
from .palette import Palette

MAX_4BPP_INDEX = 15
MAX_MAP_INDEX = 255


@dataclass(frozen=True)
class Tile:
    indexes: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.indexes)

    def to_4bpp(self) -> bytes:
        if len(self.indexes) % 2:
            raise ConversionError(
                f"4bpp packing needs an even pixel count, tile has {len(self.indexes)}"
            )
        data = bytearray()
        for pos in range(0, len(self.indexes), 2):
            low, high = self.indexes[pos], self.indexes[pos + 1]
            for offset, value in ((0, low), (1, high)):
                if value > MAX_4BPP_INDEX:
                    raise FormatOverflowError(
                        f"Input image has too many colors: palette index {value} "
                        f"at pixel {pos + offset} does not fit in 4 bits",
                        value=value,
                        limit=MAX_4BPP_INDEX,
                        location=f"pixel {pos + offset}",
                    )
            data.append(low | (high << 4))
        return bytes(data)


def build_tile(
    pixels: Iterable[Sequence[int]],
    palette: Palette,
    alpha_threshold: int,
) -> Tuple[Tile, int]:
    """Resolve RGBA pixels to palette indices, growing ``palette`` as needed.

    Pixels with alpha below ``alpha_threshold`` become index 0 without
    touching the palette. Returns the tile and the number of such pixels.
    """
    indexes: List[int] = []
    transparent = 0
    for r, g, b, a in pixels:
        if a < alpha_threshold:
            indexes.append(0)
            transparent += 1
            continue
        color = (r, g, b)
        index = palette.lookup(color)
        if index is None:
            index = palette.insert(color)
        indexes.append(index)
    return Tile(tuple(indexes)), transparent


class TileAtlas:
    """Deduplicated tiles in first-seen order."""

    def __init__(self) -> None:
        self._tiles: List[Tile] = []
        self._index: Dict[Tile, int] = {}

    def update(self, tile: Tile) -> int:
        """Return the index of ``tile``, appending it if it is new."""
        index = self._index.get(tile)
        if index is not None:
            return index
        self._tiles.append(tile)
        index = len(self._tiles) - 1
        self._index[tile] = index
        return index

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __getitem__(self, index: int) -> Tile:
        return self._tiles[index]

    def to_4bpp(self) -> bytes:
        return b"".join(self._pack(number, tile) for number, tile in enumerate(self._tiles))

    def write_4bpp(self, sink: BinaryIO) -> int:
        """Write every tile packed at 4bpp.

        Each tile is written as soon as it is packed, so tiles before an
        overflowing one are already in ``sink`` when the error is raised.
        """
        written = 0
        for number, tile in enumerate(self._tiles):
            data = self._pack(number, tile)
            sink.write(data)
            written += len(data)
        return written

    @staticmethod
    def _pack(number: int, tile: Tile) -> bytes:
        try:
            return tile.to_4bpp()
        except FormatOverflowError as exc:
            raise FormatOverflowError(
                f"Tile {number}: {exc}",
                value=exc.value,
                limit=exc.limit,
                location=f"tile {number}, {exc.location}",
            ) from exc


class TileMap:
    """Atlas indices recorded per sub-tile row in scan order."""

    def __init__(self) -> None:
        self.rows: List[List[int]] = []

    def start_row(self) -> None:
        self.rows.append([])

    def append(self, index: int) -> None:
        if not self.rows:
            self.start_row()
        self.rows[-1].append(index)

    def entries(self) -> List[int]:
        return [index for row in self.rows for index in row]

    def __len__(self) -> int:
        return sum(len(row) for row in self.rows)

    def _check(self, row: int, column: int, index: int) -> None:
        if index > MAX_MAP_INDEX:
            raise FormatOverflowError(
                f"Too many tiles: index {index} at row {row}, column {column} "
                "is too large for an 8-bit map",
                value=index,
                limit=MAX_MAP_INDEX,
                location=f"row {row}, column {column}",
            )

    def to_8bit(self) -> bytes:
        data = bytearray()
        for y, row in enumerate(self.rows):
            for x, index in enumerate(row):
                self._check(y, x, index)
                data.append(index)
        return bytes(data)

    def write_8bit(self, sink: BinaryIO) -> int:
        written = 0
        for y, row in enumerate(self.rows):
            for x, index in enumerate(row):
                self._check(y, x, index)
                sink.write(bytes([index]))
                written += 1
        return written
