"""Palette table and RGB555 encoding."""

# RGB555 word layout (little endian on disk)
# Bits   | Usage
# -------|--------------------------
# 0-4    | red >> 3
# 5-9    | green >> 3
# 10-14  | blue >> 3
# 15     | always 0

from __future__ import annotations

from typing import BinaryIO, Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import ConversionError

Color = Tuple[int, int, int]


def parse_color(text: str) -> Color:
    """Parse ``R,G,B``, ``R,G,B,A``, ``#RRGGBB`` or ``RRGGBBAA`` into RGB.

    An alpha component is accepted for convenience and dropped.
    """
    text = text.strip()
    if text.startswith("#"):
        text = text[1:]
    hex_form = "," not in text
    if hex_form:
        if len(text) not in (6, 8):
            raise ConversionError(f"Hex colors must be RRGGBB or RRGGBBAA: {text}")
        parts = [text[i : i + 2] for i in range(0, len(text), 2)]
    else:
        parts = text.split(",")
    if len(parts) not in (3, 4):
        raise ConversionError("Color must have three or four components")
    values = []
    for part in parts:
        part = part.strip()
        base = 16 if hex_form else 10
        try:
            values.append(int(part, base))
        except ValueError as exc:
            raise ConversionError(f"Invalid color component: {part}") from exc
    if any(not (0 <= v <= 255) for v in values):
        raise ConversionError("Color components must be between 0 and 255")
    r, g, b = values[:3]
    return (r, g, b)


def to_rgb(color: Sequence[int]) -> Color:
    if len(color) not in (3, 4):
        raise ConversionError(f"Expected an RGB or RGBA color, got {tuple(color)}")
    try:
        rgb = tuple(int(v) for v in color[:3])
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Invalid color: {tuple(color)}") from exc
    if any(not (0 <= v <= 255) for v in rgb):
        raise ConversionError("Color components must be between 0 and 255")
    r, g, b = rgb
    return (r, g, b)


def encode_rgb555(color: Color) -> int:
    r, g, b = color
    return (r >> 3) | ((g >> 3) << 5) | ((b >> 3) << 10)


class Palette:
    """Append-only color table with stable indices."""

    def __init__(self, colors: Sequence[Color] = ()):
        self._table: List[Color] = []
        self._index: Dict[Color, int] = {}
        for color in colors:
            self.insert(color)

    def insert(self, color: Sequence[int]) -> int:
        """Append ``color`` without checking for an existing entry.

        Callers are expected to :meth:`lookup` first. If a duplicate is
        appended anyway, lookups keep returning the earlier index.
        """
        rgb = to_rgb(color)
        self._table.append(rgb)
        index = len(self._table) - 1
        self._index.setdefault(rgb, index)
        return index

    def lookup(self, color: Sequence[int]) -> Optional[int]:
        return self._index.get(to_rgb(color))

    @property
    def colors(self) -> List[Color]:
        return list(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._table)

    def __getitem__(self, index: int) -> Color:
        return self._table[index]

    def __repr__(self) -> str:
        return f"Palette({self._table!r})"

    def to_rgb555(self, skip_first: bool = False) -> bytes:
        table = self._table[1:] if skip_first else self._table
        data = bytearray()
        for color in table:
            data += encode_rgb555(color).to_bytes(2, "little")
        return bytes(data)

    def write_rgb555(self, sink: BinaryIO, skip_first: bool = False) -> int:
        """Write the palette as little-endian RGB555 words.

        ``skip_first`` leaves out index 0, for consumers that treat the
        reserved transparency slot as software-only.
        """
        data = self.to_rgb555(skip_first)
        sink.write(data)
        return len(data)
