"""Playwright session that renders a page and reads its image sources."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from .config import HarvestConfig, SettleStrategy
from .errors import SessionFailed

logger = logging.getLogger("image_harvest.browser")

EXTRACT_IMG_SOURCES = (
    'Array.from(document.querySelectorAll("img"))'
    '.map(img => img.getAttribute("src") || "")'
)


class BrowserSession:
    """A Chromium page owned for the duration of an ``async with`` block.

    With a profile directory the session runs in a persistent context so the
    user's cookies and logins apply; otherwise a throwaway browser is used.
    Both are closed when the block exits, whether or not it raised.
    """

    def __init__(self, playwright: Playwright, config: HarvestConfig) -> None:
        self._playwright = playwright
        self._config = config
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserSession":
        chromium = self._playwright.chromium
        args = list(self._config.browser_args)
        try:
            if self._config.user_profile_dir is not None:
                logger.debug("Launching Chromium with profile %s", self._config.user_profile_dir)
                self._context = await chromium.launch_persistent_context(
                    str(self._config.user_profile_dir),
                    headless=self._config.headless,
                    args=args,
                )
                pages = self._context.pages
                self._page = pages[0] if pages else await self._context.new_page()
            else:
                logger.debug("Launching Chromium (headless=%s)", self._config.headless)
                self._browser = await chromium.launch(headless=self._config.headless, args=args)
                self._page = await self._browser.new_page()
        except PlaywrightError as exc:
            await self.close()
            raise SessionFailed(f"could not launch Chromium: {exc}") from exc
        self._page.set_default_navigation_timeout(self._config.navigation_timeout * 1000)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise SessionFailed("browser session is not open")
        return self._page

    async def close(self) -> None:
        self._page = None
        owners = [owner for owner in (self._context, self._browser) if owner is not None]
        self._context = None
        self._browser = None
        for owner in owners:
            try:
                await owner.close()
            except PlaywrightError as exc:
                logger.debug("Ignoring error while closing the browser: %s", exc)

    async def navigate(self, url: str) -> None:
        wait_until = (
            "networkidle"
            if self._config.settle_strategy is SettleStrategy.NETWORK_IDLE
            else "load"
        )
        await self.page.goto(url, wait_until=wait_until)

    async def settle(self) -> None:
        """Give client-side scripts time to finish mutating the DOM."""
        if self._config.settle_strategy is SettleStrategy.SELECTOR:
            await self.page.wait_for_selector(
                self._config.settle_selector,
                state="attached",
                timeout=self._config.navigation_timeout * 1000,
            )
        if self._config.settle_seconds:
            await self.page.wait_for_timeout(self._config.settle_seconds * 1000)

    async def evaluate(self, script: str) -> Any:
        return await self.page.evaluate(script)


def _coerce_sources(result: Any) -> List[str]:
    if not isinstance(result, list):
        raise SessionFailed(f"unexpected result from image query: {result!r}")
    sources: List[str] = []
    for value in result:
        if value is None:
            sources.append("")
        elif isinstance(value, str):
            sources.append(value)
        else:
            raise SessionFailed(f"unexpected image source value: {value!r}")
    return sources


async def render_sources(url: str, config: HarvestConfig) -> List[str]:
    """Render ``url`` and return the ``src`` of every ``img`` in DOM order."""
    try:
        async with async_playwright() as playwright:
            async with BrowserSession(playwright, config) as session:
                logger.info("Loading %s", url)
                await session.navigate(url)
                await session.settle()
                result = await session.evaluate(EXTRACT_IMG_SOURCES)
    except PlaywrightError as exc:
        raise SessionFailed(f"browser session failed for {url}: {exc}") from exc
    sources = _coerce_sources(result)
    logger.debug("Found %d img elements on %s", len(sources), url)
    return sources
