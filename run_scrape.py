#!/usr/bin/env python3
"""
CLI script for running one extraction against the live target.

Usage:
    python run_scrape.py latest [--page N]
    python run_scrape.py details <content_id>
    python run_scrape.py episodes <content_id>
    python run_scrape.py stream <episode_id>
    python run_scrape.py search <query>
Add --no-headless to watch the browser.
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from engine import AnimeScraperService, BrowserPool, ScraperError, user_safe_message
from shared.config import get_config
from shared.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract records from the rendered target site")
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show browser window (Chrome). Use for local debugging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    latest = sub.add_parser("latest", help="Latest releases listing")
    latest.add_argument("--page", type=int, default=1)

    details = sub.add_parser("details", help="Series detail")
    details.add_argument("content_id")

    episodes = sub.add_parser("episodes", help="Episode list of a series")
    episodes.add_argument("content_id")

    stream = sub.add_parser("stream", help="Resolve the media URL of an episode")
    stream.add_argument("episode_id")

    search = sub.add_parser("search", help="Search the catalogue")
    search.add_argument("query")
    return parser


async def _run(service: AnimeScraperService, args: argparse.Namespace):
    if args.command == "latest":
        return [r.to_dict() for r in await service.get_latest_listing(args.page)]
    if args.command == "details":
        return (await service.get_detail(args.content_id)).to_dict()
    if args.command == "episodes":
        return [e.to_dict() for e in await service.get_episodes(args.content_id)]
    if args.command == "stream":
        return (await service.get_stream_resolution(args.episode_id)).to_dict()
    return [r.to_dict() for r in await service.search_listing(args.query)]


async def main() -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args()

    config = get_config()
    configure_logging(
        level=logging.getLevelName(config.log_level.upper()),
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )

    pool = BrowserPool(headless=config.browser_headless and not args.no_headless)
    service = AnimeScraperService(pool, config)
    try:
        result = await _run(service, args)
    except ScraperError as e:
        print(f"ERROR: {user_safe_message(e)} ({type(e).__name__})", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    finally:
        await pool.shutdown()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
