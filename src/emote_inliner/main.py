#!/usr/bin/env python3
"""Main entry point for Emote Inliner."""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .chat.models import TextNode
from .core.models import ImageScale
from .core.service import EmoteService
from .core.settings import MAX_GLOBAL_PAGES, Settings

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Suppress noisy third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emote-inliner",
        description="Replace 7TV emote names in text with inline emote nodes.",
    )
    parser.add_argument("text", nargs="*", help="Text to rewrite (reads stdin if omitted)")
    parser.add_argument("--settings", type=Path, help="Settings file to use")
    parser.add_argument(
        "--scale", choices=[s.value for s in ImageScale], help="Emote image scale"
    )
    parser.add_argument(
        "--pages", type=int, help=f"Global popularity pages to fetch (1-{MAX_GLOBAL_PAGES})"
    )
    parser.add_argument(
        "--set", dest="emote_sets", action="append", default=[], metavar="ID",
        help="7TV emote set id to fetch before the global emotes (repeatable)",
    )
    parser.add_argument("--no-global", action="store_true", help="Skip the global emotes")
    parser.add_argument("--quiet", action="store_true", help="Disable progress notifications")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command line overrides to loaded settings (not saved)."""
    emotes = settings.emotes
    if args.scale:
        emotes.scale = ImageScale(args.scale)
    if args.pages is not None:
        emotes.global_pages = Settings._validate_int(
            args.pages, emotes.global_pages, min_val=1, max_val=MAX_GLOBAL_PAGES
        )
    if args.emote_sets:
        emotes.emote_sets = list(args.emote_sets)
    if args.no_global:
        emotes.use_global = False
    if args.quiet:
        emotes.show_notifications = False
    return settings


async def run(settings: Settings, lines: list[str]) -> int:
    """Build the catalog, then print the rewritten nodes of each line as JSON."""
    service = EmoteService(settings)
    await service.start()
    try:
        catalog = await service.wait_ready()
        if not catalog:
            logger.warning("Emote catalog is empty, no emotes will be replaced")

        for line in lines:
            nodes = service.rewrite([TextNode(content=line)])
            print(json.dumps([asdict(node) for node in nodes], ensure_ascii=False))
    finally:
        await service.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    settings = apply_overrides(Settings.load(args.settings), args)

    if args.text:
        lines = [" ".join(args.text)]
    else:
        lines = [line.rstrip("\n") for line in sys.stdin]

    try:
        return asyncio.run(run(settings, lines))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
