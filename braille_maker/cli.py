"""Command-line interface for braille_maker.

Supports both interactive TUI mode and headless/JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from braille_maker.core.errors import ConfigError
from braille_maker.core.evaluator import Strategy
from braille_maker.core.processor import DEFAULT_RULE_TEXT, Settings
from braille_maker.core.rules import RULE_FORMATS
from braille_maker.core.size import DEFAULT_SIZE_TEXT

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="braille-maker",
        description="Render images as Unicode braille text.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Render an image to braille text.",
    )
    convert.add_argument("input", help="Input image or video file path.")
    convert.add_argument(
        "-s", "--size",
        default=DEFAULT_SIZE_TEXT,
        help="Resize to WIDTHxHEIGHT pixels before rendering, '_' keeps the "
        "source size (default: _).",
    )
    convert.add_argument(
        "-r", "--rule",
        default=DEFAULT_RULE_TEXT,
        help=f"On/off rule: {', '.join(RULE_FORMATS)} (default: {DEFAULT_RULE_TEXT}).",
    )
    convert.add_argument(
        "--fit",
        action="store_true",
        help="Keep the aspect ratio, fitting inside --size.",
    )
    convert.add_argument(
        "--inclusive",
        action="store_true",
        help="Count cells as height//4 + 1 rows and width//2 + 1 columns, which "
        "always adds a trailing blank row and column. By default partial edge "
        "cells are rounded up instead.",
    )
    convert.add_argument(
        "--strategy",
        choices=[s.value for s in Strategy],
        default=Strategy.VECTORIZED.value,
        help="Rule evaluation strategy (default: vectorized).",
    )
    convert.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread count for the threaded strategy.",
    )
    convert.add_argument(
        "--frame",
        type=int,
        default=0,
        help="Frame index for animations and videos (default: 0).",
    )
    convert.add_argument(
        "-o", "--output",
        help="Write to a .txt or image file instead of stdout.",
    )
    convert.add_argument(
        "--font-size",
        type=int,
        default=14,
        help="Font size for image output (default: 14).",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    convert.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log pipeline details to stderr.",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error.",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _fail(message: str, code: str, is_json: bool, debug: bool = False) -> None:
    """Report an error on stderr and exit with code 1."""
    if debug:
        import traceback
        traceback.print_exc(file=sys.stderr)
    if is_json:
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_strings(
        rule=args.rule,
        size=args.size,
        strategy=Strategy(args.strategy),
        keep_aspect=args.fit,
        inclusive=args.inclusive,
        max_workers=args.workers,
    )


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from braille_maker.core.processor import process_image
    from braille_maker.core.reader import open_media
    from braille_maker.core.writer import save_output, write_text

    is_json = args.json

    # Configuration is validated before any image is touched
    try:
        settings = _settings_from_args(args)
    except ConfigError as e:
        _fail(str(e), "INVALID_CONFIG", is_json)

    input_path = Path(args.input).resolve()
    if not input_path.exists():
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)

    try:
        reader = open_media(input_path)
        image = reader.seek(args.frame)
    except (OSError, ValueError, IndexError) as e:
        _fail(str(e), "INVALID_INPUT", is_json, args.debug)

    info = reader.info
    logger.debug("Opened %s (%s, %d frames)", info.path, info.format, info.frame_count)

    output_path = Path(args.output).resolve() if args.output else None
    try:
        rendered = process_image(image, settings)
        if output_path is not None:
            save_output(rendered.lines, output_path, font_size=args.font_size)
    except (OSError, ValueError) as e:
        _fail(str(e), "PROCESSING_ERROR", is_json, args.debug)

    if not is_json:
        if output_path is None:
            write_text(rendered.lines, sys.stdout)
        else:
            print(f"Saved to {output_path}", file=sys.stderr)
        return

    result = {
        "status": "success",
        "input": str(input_path),
        "output": str(output_path) if output_path else None,
        "settings": {
            "rule": str(settings.rule),
            "size": str(settings.size),
            "strategy": settings.strategy.value,
            "fit": settings.keep_aspect,
            "inclusive": settings.inclusive,
        },
        "metadata": {
            "input_format": info.format,
            "input_width": info.width,
            "input_height": info.height,
            "frame": args.frame,
            "pixel_width": rendered.width,
            "pixel_height": rendered.height,
            "cols": rendered.cols,
            "rows": rendered.rows,
        },
    }
    if output_path is None:
        result["lines"] = rendered.lines
    print(json.dumps(result, indent=2, ensure_ascii=False))


def main() -> None:
    """Main entry point.

    Routing:
      braille-maker convert <file> [opts]  → render to stdout / file
      braille-maker <file>                 → launch TUI with file
      braille-maker                        → launch TUI (file picker)
    """
    # If the first real arg isn't "convert", treat it as a direct TUI launch
    # to avoid argparse subparser consuming the file path as a subcommand.
    raw_args = sys.argv[1:]
    if raw_args and raw_args[0] == "convert":
        parser = _build_parser()
        args = parser.parse_args(raw_args)
        _configure_logging(args.verbose)
        _run_convert(args)
    elif raw_args and not raw_args[0].startswith("-"):
        from braille_maker.app import run_app
        run_app(input_path=raw_args[0])
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args(raw_args)
    else:
        from braille_maker.app import run_app
        run_app()


if __name__ == "__main__":
    main()
