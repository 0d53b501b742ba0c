"""Command-line entry point for the image harvester."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_SETTLE_SECONDS, HarvestConfig, SettleStrategy
from .errors import HarvestError
from .harvester import run_harvest
from .profile import resolve_profile_dir

logger = logging.getLogger("image_harvest.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a web page in Chromium via Playwright and download every image it shows.",
    )
    parser.add_argument("url", help="URL of the page to render")
    parser.add_argument(
        "output",
        type=Path,
        help="Directory where downloaded images should be written",
    )
    parser.add_argument(
        "--settle",
        type=float,
        default=DEFAULT_SETTLE_SECONDS,
        help="Seconds to wait after loading before reading image sources",
    )
    parser.add_argument(
        "--settle-strategy",
        choices=[strategy.value for strategy in SettleStrategy],
        default=SettleStrategy.FIXED.value,
        help="When the page counts as rendered: after load, after network idle, or once --selector appears",
    )
    parser.add_argument(
        "--selector",
        default=None,
        help="CSS selector to wait for with --settle-strategy selector",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    profile = parser.add_mutually_exclusive_group()
    profile.add_argument(
        "--profile-dir",
        type=Path,
        default=None,
        help="Chrome profile directory to launch with (default: the current user's profile)",
    )
    profile.add_argument(
        "--no-profile",
        action="store_true",
        help="Launch with a throwaway profile instead of the user's Chrome profile",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def _run(args: argparse.Namespace) -> int:
    config = HarvestConfig(
        page_url=args.url,
        output_root=Path(args.output).resolve(),
        settle_seconds=args.settle,
        settle_strategy=SettleStrategy(args.settle_strategy),
        settle_selector=args.selector,
        navigation_timeout=args.timeout,
        headless=not args.headful,
        user_profile_dir=resolve_profile_dir(args.profile_dir, discover=not args.no_profile),
    )

    try:
        report = asyncio.run(run_harvest(config))
    except HarvestError as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Finished in %.2fs (%d/%d downloaded, %d failed)",
        report.total_seconds,
        report.downloaded,
        report.resolved,
        report.failed,
    )
    if args.verbose:
        for path in report.saved:
            logger.debug("Saved %s", path)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    sys.exit(_run(args))


if __name__ == "__main__":
    main()
