"""
Playlist → Piped Music converter — command-line entry point.
Loads configuration, runs the conversion pipeline, and exports the JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import aiohttp

from config.constants import USER_AGENT
from config.settings import Settings
from utils.errors import ConfigError, ConverterError
from utils.piped_export import PipedExport
from utils.pipeline import PlaylistPipeline

logger = logging.getLogger("piped_convert")


def setup_logging(level: str) -> None:
    # stdout is reserved for the exported document
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s │ %(levelname)-8s │ %(name)-20s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="piped-convert",
        description="Convert YouTube and Spotify playlists into a Piped Music import file.",
    )
    parser.add_argument("references", nargs="*", help="Playlist URLs (one reference each).")
    parser.add_argument(
        "-i", "--input",
        help="Read references (or pasted Spotify data with --freeform) from a file; '-' for stdin.",
    )
    parser.add_argument(
        "--freeform",
        action="store_true",
        help="Treat the whole input as pasted Spotify playlist data (JSON or 'Artist - Title' lines).",
    )
    parser.add_argument(
        "-o", "--output",
        help="Write the JSON document to this file ('-' for stdout). Defaults to OUTPUT_PATH.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def read_input(args: argparse.Namespace) -> str:
    if args.input == "-":
        return sys.stdin.read()
    if args.input:
        with open(args.input, encoding="utf-8") as fh:
            return fh.read()
    return "\n".join(args.references)


async def convert(text: str, settings: Settings, freeform: bool = False) -> PipedExport:
    """Run one conversion inside a dedicated HTTP session."""
    async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
        pipeline = PlaylistPipeline.from_settings(session, settings)
        return await pipeline.convert(text, freeform=freeform)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    errors = settings.validate()
    if errors:
        for err in errors:
            logger.error("Config error: %s", err)
        return 2

    try:
        text = read_input(args)
    except OSError as exc:
        logger.error("Could not read input: %s", exc)
        return 1

    try:
        export = asyncio.run(convert(text, settings, freeform=args.freeform))
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except ConverterError as exc:
        logger.error("Conversion failed: %s", exc)
        return 1

    output = args.output or settings.output_path
    if output == "-":
        sys.stdout.write(export.to_json() + "\n")
    else:
        try:
            export.write(output)
        except OSError as exc:
            logger.error("Could not write %s: %s", output, exc)
            return 1

    logger.info("Converted %d songs to Piped Music format", export.song_count)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
