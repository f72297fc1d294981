# nespal/cli.py
"""
nespal command line.

Usage:
  nespal identify IMAGE [PALETTE.pal ...] [--custom-only]
  nespal remap IMAGE PALETTE.pal OUTPUT
  nespal remap IMAGE --palette NAME OUTPUT
  nespal list
  nespal help [COMMAND]

Global flags:
  --debug             timings and per-step details
  --palette-dir DIR   use DIR/*.pal instead of the built-in palettes
                      (also read from $NESPAL_PALETTE_DIR)

Exit codes:
  0 success (including "no palette matches")
  1 I/O or decode failure
  2 usage error
"""

from __future__ import annotations

import argparse
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image

from .constants import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, PALETTE_BYTES, PALETTE_EXTENSION
from .errors import NespalError, UnsupportedPaletteFormatError, UsageError
from .identify import Candidate, identify
from .image_io import load_image_rgb, output_format_for, save_image_rgb
from .palette_data import PaletteCollection, default_collection, load_palette
from .remap import remap_image
from .utils import (
    debug_log,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    palette_usage_report,
    print_config_line,
    warn,
)

PROG = "nespal"

# CLI args & small helpers


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns the top-level parser; subcommand parsers are reachable through
    the `_command_parsers` attribute for `help COMMAND`.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Manipulate images using color palettes from the Nintendo "
            "Entertainment System (NES) emulation ecosystem."
        ),
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    parser.add_argument(
        "--palette-dir",
        type=Path,
        default=None,
        help="Directory of .pal files to use instead of the built-in palettes",
    )
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    p_identify = sub.add_parser(
        "identify",
        help="analyzes an image and identifies the color palette used",
        description=(
            "Analyzes an image and identifies the color palette used. "
            f"The output is the matching palette from the default list (see '{PROG} list'). "
            "Palettes given on the command line are tried first."
        ),
    )
    p_identify.add_argument("image", type=Path, help="Image to analyze")
    p_identify.add_argument(
        "palettes", nargs="*", type=Path, help="Extra .pal files to match against"
    )
    p_identify.add_argument(
        "-c",
        "--custom-only",
        action="store_true",
        help="Only match against input color palettes",
    )

    p_remap = sub.add_parser(
        "remap",
        help="replaces the colors in an image using a color palette",
        description="Replaces the colors in an image using a color palette.",
        usage=f"{PROG} remap <image> [-p NAME] [palette.pal] <output_image>",
    )
    p_remap.add_argument("image", type=Path, help="Image to remap")
    p_remap.add_argument(
        "rest", nargs="*", metavar="ARG", help="[palette.pal] output_image"
    )
    p_remap.add_argument(
        "-p", "--palette", default=None, help="Color palette to remap image to"
    )

    sub.add_parser(
        "list",
        help="displays the default palette list",
        description="Displays the default palette list.",
    )

    p_help = sub.add_parser("help", help="shows help for a command")
    p_help.add_argument("topic", nargs="?", default=None)

    parser._command_parsers = {  # type: ignore[attr-defined]
        "identify": p_identify,
        "remap": p_remap,
        "list": sub.choices["list"],
    }
    return parser


def _require_pal_extension(path: Path) -> Path:
    if path.suffix.lower() != PALETTE_EXTENSION:
        raise UnsupportedPaletteFormatError(str(path))
    return path


def _check_palette_size(path: Path) -> None:
    """Warn about files that are longer than a palette; the extra bytes are ignored."""
    size = path.stat().st_size
    if size > PALETTE_BYTES:
        warn(f"{path.name}: {size} bytes, only the first {PALETTE_BYTES} are used")


# Commands


def cmd_identify(args: argparse.Namespace, collection: PaletteCollection) -> int:
    """Print which palette the image uses, if any."""
    pal_paths: List[Path] = [_require_pal_extension(p) for p in args.palettes]

    t0 = time.perf_counter()
    img = load_image_rgb(args.image)
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{img.shape[1]}x{img.shape[0]}"),
                    ("Custom palettes", len(pal_paths)),
                    ("Custom only", args.custom_only),
                ]
            )
        )

    with ExitStack() as stack:
        custom: List[Candidate] = []
        for path in pal_paths:
            _check_palette_size(path)
            custom.append((path.stem, stack.enter_context(path.open("rb"))))
        result = identify(img, custom, collection, custom_only=args.custom_only)

    if result.matched:
        log(f"The palette used in this image was: {result.name}")
    else:
        log("No palette matches this image colorscheme")
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Palettes tried", result.tried),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return EXIT_OK


def _remap_targets(
    args: argparse.Namespace, collection: PaletteCollection
) -> Tuple[str, Union[bytes, Path], Path]:
    """
    Resolve (palette name, byte source or path, output path) from remap args.

    With --palette the positional list is just the output; otherwise it is
    the palette file then the output.
    """
    rest: List[str] = list(args.rest)
    if args.palette is not None:
        name = "".join(args.palette.split())
        if not name:
            raise UsageError("empty value for '--palette' flag")
        if "." in args.palette:
            raise UsageError(f"invalid value '{args.palette}' for '--palette' flag")
        source = collection.read(args.palette)
        if not rest:
            raise UsageError("missing output image")
        if len(rest) > 1:
            raise UsageError(f"unexpected arguments: {' '.join(rest[1:])}")
        return args.palette, source, Path(rest[0])

    if not rest:
        raise UsageError("missing color palette")
    pal_path = _require_pal_extension(Path(rest[0]))
    if len(rest) == 1:
        raise UsageError("missing output image")
    if len(rest) > 2:
        raise UsageError(f"unexpected arguments: {' '.join(rest[2:])}")
    return pal_path.stem, pal_path, Path(rest[1])


def cmd_remap(args: argparse.Namespace, collection: PaletteCollection) -> int:
    """Write the image remapped onto one palette."""
    name, source, out_path = _remap_targets(args, collection)
    output_format_for(out_path)

    t0 = time.perf_counter()
    img = load_image_rgb(args.image)
    if isinstance(source, Path):
        _check_palette_size(source)
        with source.open("rb") as fh:
            palette = load_palette(fh, name)
    else:
        palette = load_palette(source, name)
    t1 = time.perf_counter()

    if args.debug:
        print_config_line(
            "remap",
            [
                ("Image", f"{img.shape[1]}x{img.shape[0]}"),
                ("Palette", name),
                ("Output", out_path.name),
            ],
            debug=True,
        )

    mapped = remap_image(img, palette)
    t2 = time.perf_counter()
    save_image_rgb(out_path, mapped)
    t3 = time.perf_counter()

    if args.debug:
        debug_log("Colours used:")
        for label, hex_code, count in palette_usage_report(mapped, palette):
            debug_log(f"  {label}  {hex_code}: {count:,}")
        debug_log(
            f"Total {format_seconds_compact(t3 - t0)}  "
            f"(load={format_seconds_compact(t1 - t0)}, remap={format_seconds_compact(t2 - t1)}, "
            f"save={format_seconds_compact(t3 - t2)})"
        )
    return EXIT_OK


def cmd_list(args: argparse.Namespace, collection: PaletteCollection) -> int:
    """Print palette names, one per line."""
    for name in collection.names():
        log(name)
    return EXIT_OK


def cmd_help(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.topic is None:
        parser.print_help()
        return EXIT_OK
    command_parsers: Dict[str, argparse.ArgumentParser] = parser._command_parsers  # type: ignore[attr-defined]
    target = command_parsers.get(args.topic)
    if target is None:
        error(f'unknown help topic "{args.topic}"')
        log(f"Try: {PROG} help")
        return EXIT_USAGE
    target.print_help()
    return EXIT_OK


# Entry point


def _absorb_trailing_positionals(
    parser: argparse.ArgumentParser, args: argparse.Namespace, extras: List[str]
) -> None:
    """
    Attach positionals that argparse left over after an interleaved flag.

    `remap img -p NAME out.png` parses `img` and then closes the `*` list
    before `-p`, leaving `out.png` unclaimed.
    """
    if not extras:
        return
    stray = [e for e in extras if e.startswith("-")]
    if stray or args.command not in ("identify", "remap"):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command == "identify":
        args.palettes.extend(Path(e) for e in extras)
    else:
        args.rest.extend(extras)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit code.

    nespal errors carry their own exit code; other OS level failures
    (missing files, undecodable images) exit with 1.
    """
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    _absorb_trailing_positionals(parser, args, extras)

    if args.command is None:
        parser.print_help()
        error("missing command")
        return EXIT_USAGE
    if args.command == "help":
        return cmd_help(args, parser)

    collection = default_collection(args.palette_dir)
    if args.debug:
        print_config_line(
            "run",
            [
                ("Command", args.command),
                ("Palettes", str(args.palette_dir) if args.palette_dir else "built-in"),
            ],
            debug=True,
        )

    handlers = {
        "identify": cmd_identify,
        "remap": cmd_remap,
        "list": cmd_list,
    }
    try:
        return handlers[args.command](args, collection)
    except NespalError as exc:
        error(str(exc))
        return exc.exit_code
    except (OSError, Image.DecompressionBombError) as exc:
        error(str(exc))
        return EXIT_FAILURE


def run() -> None:
    raise SystemExit(main())


__all__ = ["build_parser", "main", "run"]
