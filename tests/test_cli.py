from pathlib import Path
import sys

from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from simple_tile_converter.cli import main


def _write_sample_png(directory: Path) -> Path:
    image = Image.new("RGBA", (32, 16), (255, 0, 255, 255))
    image.paste((0, 255, 0, 255), (0, 0, 8, 8))
    image.paste((0, 0, 0, 0), (16, 0, 32, 16))
    path = directory / "sample.png"
    image.save(path)
    return path


def test_cli_writes_all_outputs(tmp_path: Path, capsys) -> None:
    source = _write_sample_png(tmp_path)
    tiles, palette, tilemap = tmp_path / "tiles.bin", tmp_path / "pal.bin", tmp_path / "map.bin"

    code = main([str(source), str(tiles), str(palette), "--map", str(tilemap)])

    assert code == 0
    # green tile, magenta tile; the transparent half reuses the magenta tile
    assert tiles.read_bytes() == bytes([0x11] * 32 + [0x00] * 32)
    assert palette.read_bytes() == bytes([0x1F, 0x7C, 0xE0, 0x03])
    assert tilemap.read_bytes() == bytes([0, 1, 1, 1, 1, 1, 1, 1])
    out = capsys.readouterr().out
    assert f"wrote {tiles}" in out
    assert "2 tiles, 2 colors" in out


def test_cli_options(tmp_path: Path) -> None:
    source = _write_sample_png(tmp_path)
    tiles, palette = tmp_path / "tiles.bin", tmp_path / "pal.bin"

    code = main(
        [
            str(source),
            str(tiles),
            str(palette),
            "--tile-size",
            "8",
            "8",
            "--transparent",
            "0,0,0",
            "--skip-first-color",
        ]
    )

    assert code == 0
    assert palette.read_bytes() == bytes([0xE0, 0x03, 0x1F, 0x7C])
    assert len(tiles.read_bytes()) == 3 * 32


def test_cli_reports_alias_warning(tmp_path: Path, capsys) -> None:
    source = _write_sample_png(tmp_path)

    code = main(
        [str(source), str(tmp_path / "t.bin"), str(tmp_path / "p.bin"), "--no-transparent"]
    )

    assert code == 0
    assert "Warning:" in capsys.readouterr().out


def test_cli_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    source = _write_sample_png(tmp_path)
    tiles = tmp_path / "tiles.bin"
    tiles.write_bytes(b"keep")

    code = main([str(source), str(tiles), str(tmp_path / "pal.bin")])

    assert code == 1
    assert "already exist" in capsys.readouterr().err
    assert tiles.read_bytes() == b"keep"

    assert main([str(source), str(tiles), str(tmp_path / "pal.bin"), "--force"]) == 0
    assert tiles.read_bytes() != b"keep"


def test_cli_missing_input(tmp_path: Path, capsys) -> None:
    code = main([str(tmp_path / "none.png"), str(tmp_path / "t.bin"), str(tmp_path / "p.bin")])

    assert code == 1
    assert "Input file not found" in capsys.readouterr().err


def test_cli_too_many_colors(tmp_path: Path, capsys) -> None:
    image = Image.new("RGB", (16, 16))
    image.putdata([(i, 0, 0) for i in range(256)])
    source = tmp_path / "colors.png"
    image.save(source)

    code = main([str(source), str(tmp_path / "t.bin"), str(tmp_path / "p.bin")])

    assert code == 1
    assert "too many colors" in capsys.readouterr().err
