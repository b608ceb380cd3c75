from io import BytesIO
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from simple_tile_converter import ConversionError, Palette, encode_rgb555, parse_color


def test_encode_rgb555_channels() -> None:
    assert encode_rgb555((248, 0, 0)) == 0x001F
    assert encode_rgb555((0, 255, 0)) == 0x03E0
    assert encode_rgb555((0, 0, 255)) == 0x7C00
    # low three bits of every channel are dropped
    assert encode_rgb555((7, 7, 7)) == 0


def test_write_rgb555_little_endian() -> None:
    palette = Palette([(248, 0, 0), (255, 0, 255)])
    sink = BytesIO()

    assert palette.write_rgb555(sink) == 4
    assert sink.getvalue() == bytes([0x1F, 0x00, 0x1F, 0x7C])


def test_write_rgb555_skip_first() -> None:
    palette = Palette([(255, 0, 255), (0, 255, 0)])
    sink = BytesIO()

    palette.write_rgb555(sink, skip_first=True)

    assert sink.getvalue() == bytes([0xE0, 0x03])
    assert palette.to_rgb555(skip_first=True) == sink.getvalue()


def test_lookup_returns_insertion_index() -> None:
    palette = Palette()

    assert palette.lookup((1, 2, 3)) is None
    assert palette.insert((1, 2, 3)) == 0
    assert palette.insert((4, 5, 6)) == 1
    assert palette.lookup((4, 5, 6)) == 1
    # alpha is ignored for matching
    assert palette.lookup((1, 2, 3, 0)) == 0


def test_insert_is_unchecked_and_first_match_wins() -> None:
    palette = Palette()
    palette.insert((9, 9, 9))
    palette.insert((9, 9, 9))

    assert len(palette) == 2
    assert palette.lookup((9, 9, 9)) == 0
    assert palette.colors == [(9, 9, 9), (9, 9, 9)]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("FF00FF", (255, 0, 255)),
        ("#00ff0080", (0, 255, 0)),
        ("255, 0, 255", (255, 0, 255)),
        ("10,20,30", (10, 20, 30)),
        ("1,2,3,4", (1, 2, 3)),
    ],
)
def test_parse_color(text: str, expected: tuple) -> None:
    assert parse_color(text) == expected


@pytest.mark.parametrize("text", ["12,34", "FF00F", "256,0,0", "GG0000", "1,2,x"])
def test_parse_color_rejects_invalid(text: str) -> None:
    with pytest.raises(ConversionError):
        parse_color(text)


@pytest.mark.parametrize("color", [(0, 0, 256), (-1, 0, 0), (0, 300, 0, 255), ("x", 0, 0)])
def test_palette_rejects_out_of_range_channels(color: tuple) -> None:
    with pytest.raises(ConversionError):
        Palette([color])


def test_rgb555_top_bit_stays_clear() -> None:
    palette = Palette([(255, 255, 255)])

    assert palette.to_rgb555() == bytes([0xFF, 0x7F])
