"""Command line interface for the simple tile converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path
from typing import List

from .converter import Config, convert_png, write_outputs
from .errors import ConversionError
from .palette import parse_color

DEFAULT_TRANSPARENT = "FF00FF"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Convert an image into 4bpp tiles, an RGB555 palette and an optional 8-bit tile map.\n"
            "Identical tiles are stored once. Palette entries are assigned in scan order; "
            "the transparency color (if any) always takes index 0."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input", help="Source image (any format Pillow can read)")
    parser.add_argument("tiles", help="Destination for the 4bpp tile atlas")
    parser.add_argument("palette", help="Destination for the RGB555 palette")
    parser.add_argument("--map", dest="map_path", help="Destination for the 8-bit tile map")
    parser.add_argument(
        "--tile-size",
        nargs=2,
        type=int,
        default=(16, 16),
        metavar=("W", "H"),
        help="Metatile size in pixels (default: 16 16)",
    )
    parser.add_argument(
        "--subtile-size",
        nargs=2,
        type=int,
        default=(8, 8),
        metavar=("W", "H"),
        help="Hardware tile size in pixels (default: 8 8)",
    )
    parser.add_argument(
        "--transparent",
        default=DEFAULT_TRANSPARENT,
        help="Color reserved as palette 0 (e.g., FF00FF or 255,0,255)",
    )
    parser.add_argument(
        "--no-transparent",
        action="store_true",
        help="Do not reserve a transparency color",
    )
    parser.add_argument(
        "--alpha-threshold",
        type=int,
        default=128,
        help="Pixels with alpha below this value map to palette 0 (0-255)",
    )
    parser.add_argument(
        "--skip-first-color",
        action="store_true",
        help="Leave palette 0 out of the palette file",
    )
    parser.add_argument(
        "--edge",
        choices=["error", "pad"],
        default="error",
        help="How to handle tiles that extend past the image border",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files without prompting",
    )
    return parser


def build_config(args: argparse.Namespace) -> Config:
    transparency = None if args.no_transparent else parse_color(args.transparent)
    return Config(
        width=args.tile_size[0],
        height=args.tile_size[1],
        sub_width=args.subtile_size[0],
        sub_height=args.subtile_size[1],
        transparency_color=transparency,
        alpha_threshold=args.alpha_threshold,
        edge_mode=args.edge,
    )


def check_conflicts(paths: List[Path], force: bool) -> None:
    conflicts = [str(path) for path in paths if path.exists() and not force]
    if conflicts:
        raise ConversionError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        outputs = [Path(args.tiles), Path(args.palette)]
        if args.map_path:
            outputs.append(Path(args.map_path))
        check_conflicts(outputs, args.force)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = convert_png(args.input, config)
        for warning in caught:
            print(f"Warning: {warning.message}")

        written = write_outputs(
            result,
            args.tiles,
            args.palette,
            map_path=args.map_path,
            skip_first_color=args.skip_first_color,
        )
        for target, size in written.items():
            print(f"wrote {target} ({size} bytes)")
        print(f"{len(result.atlas)} tiles, {len(result.palette)} colors")
        return 0
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Failed to write output: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
