"""High-level orchestration: render the page, then download its images."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import requests

from .browser import render_sources
from .config import HarvestConfig
from .errors import DirectoryCreateFailed, DownloadFailed, SourceUnresolvable
from .fetcher import download
from .models import HarvestReport, ResolvedImage, TargetFile
from .urls import derive_file_name, parse_page_url, resolve_source

logger = logging.getLogger("image_harvest")


def prepare_output_dir(path: Path) -> Path:
    """Create the output directory, including missing parents."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateFailed(f"cannot create output directory {path}: {exc}") from exc
    return path


def resolve_entry(base: str, index: int, raw: str) -> Optional[ResolvedImage]:
    """Turn one raw ``src`` value into a resolved image, or ``None`` to skip it."""
    try:
        absolute_url = resolve_source(base, raw)
    except SourceUnresolvable as exc:
        logger.warning("Skipping image %d [%s]: %s", index + 1, raw, exc)
        return None
    if absolute_url is None:
        return None
    return ResolvedImage(index=index, raw_src=raw, absolute_url=absolute_url)


def fetch_images(
    sources: List[str],
    base: str,
    output_dir: Path,
    report: HarvestReport,
    timeout: Optional[float] = None,
) -> None:
    """Resolve, name and download each source in order, one at a time."""
    with requests.Session() as session:
        for index, raw in enumerate(sources):
            image = resolve_entry(base, index, raw)
            if image is None:
                report.skipped += 1
                continue
            report.resolved += 1
            logger.info("Image %d: %s", image.number, image.absolute_url)

            target = TargetFile(
                image=image,
                file_name=derive_file_name(image.absolute_url, image.index),
                output_dir=output_dir,
            )
            try:
                saved = download(
                    image.absolute_url,
                    target.output_dir,
                    target.file_name,
                    session=session,
                    timeout=timeout,
                )
            except DownloadFailed as exc:
                report.failed += 1
                logger.warning("Failed to download image %s: %s", image.absolute_url, exc.reason)
                continue
            report.saved.append(saved)


async def run_harvest(config: HarvestConfig) -> HarvestReport:
    """Render ``config.page_url`` and save every ``img`` it shows.

    Fatal problems (bad configuration, output directory, page URL, browser)
    raise a ``HarvestError``. Per-image problems are logged and counted in the
    returned report.
    """
    config.validate()
    start = time.perf_counter()
    output_dir = prepare_output_dir(config.output_root)
    base = parse_page_url(config.page_url)

    sources = await render_sources(base, config)

    report = HarvestReport(page_url=base, output_dir=output_dir, discovered=len(sources))
    fetch_images(sources, base, output_dir, report, timeout=config.request_timeout)
    report.total_seconds = time.perf_counter() - start
    return report
