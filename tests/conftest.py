"""
Stand-ins for Playwright and requests so the pipeline runs without a browser or network.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

import pytest
import requests
from playwright.async_api import Error as PlaywrightError

import image_harvest.browser as browser

REASONS = {200: "OK", 403: "Forbidden", 404: "Not Found", 500: "Internal Server Error"}


class FakePage:
    def __init__(self, sources, fail_on: Optional[str] = None) -> None:
        self.sources = sources
        self.fail_on = fail_on
        self.calls: List[Tuple] = []

    def set_default_navigation_timeout(self, timeout_ms):
        self.calls.append(("navigation_timeout", timeout_ms))

    async def goto(self, url, wait_until=None):
        self.calls.append(("goto", url, wait_until))
        if self.fail_on == "goto":
            raise PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

    async def wait_for_timeout(self, timeout_ms):
        self.calls.append(("wait", timeout_ms))

    async def wait_for_selector(self, selector, state=None, timeout=None):
        self.calls.append(("selector", selector, state))

    async def evaluate(self, script):
        self.calls.append(("evaluate", script))
        if self.fail_on == "evaluate":
            raise PlaywrightError("Execution context was destroyed")
        return self.sources


class FakeBrowser:
    def __init__(self, page: FakePage, fail_close: bool = False) -> None:
        self.page = page
        self.fail_close = fail_close
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise PlaywrightError("Target page, context or browser has been closed")


class FakeContext(FakeBrowser):
    @property
    def pages(self):
        return [self.page]


class FakeChromium:
    def __init__(self, page: FakePage, fail_launch: bool = False, fail_close: bool = False) -> None:
        self.page = page
        self.fail_launch = fail_launch
        self.fail_close = fail_close
        self.launched: List[Dict] = []
        self.browser: Optional[FakeBrowser] = None

    async def launch(self, headless=True, args=None):
        self.launched.append({"kind": "browser", "headless": headless, "args": args})
        if self.fail_launch:
            raise PlaywrightError("Executable doesn't exist")
        self.browser = FakeBrowser(self.page, fail_close=self.fail_close)
        return self.browser

    async def launch_persistent_context(self, user_data_dir, headless=True, args=None):
        self.launched.append(
            {"kind": "persistent", "user_data_dir": user_data_dir, "headless": headless, "args": args}
        )
        if self.fail_launch:
            raise PlaywrightError("Profile is in use")
        self.browser = FakeContext(self.page, fail_close=self.fail_close)
        return self.browser


class FakePlaywrightManager:
    def __init__(self, chromium: FakeChromium) -> None:
        self.chromium = chromium

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None


@pytest.fixture
def fake_chromium(monkeypatch):
    """Install a fake ``async_playwright`` and return a factory for its Chromium."""

    def install(
        sources,
        fail_on: Optional[str] = None,
        fail_launch: bool = False,
        fail_close: bool = False,
    ) -> FakeChromium:
        page = FakePage(sources, fail_on=fail_on)
        chromium = FakeChromium(page, fail_launch=fail_launch, fail_close=fail_close)
        monkeypatch.setattr(browser, "async_playwright", lambda: FakePlaywrightManager(chromium))
        return chromium

    return install


class StubResponse:
    def __init__(self, status_code: int, body: bytes, fail_after: Optional[int] = None) -> None:
        self.status_code = status_code
        self.reason = REASONS.get(status_code, "")
        self.body = body
        self.fail_after = fail_after
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def iter_content(self, chunk_size=1):
        for offset in range(0, len(self.body), chunk_size):
            if self.fail_after is not None and offset >= self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("Connection broken")
            yield self.body[offset : offset + chunk_size]


class StubSession:
    """Serves canned responses keyed by URL; unknown URLs fail to connect."""

    def __init__(self, routes: Dict[str, Union[StubResponse, Exception]]) -> None:
        self.routes = routes
        self.requested: List[Tuple[str, Optional[float]]] = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def get(self, url, stream=False, timeout=None):
        self.requested.append((url, timeout))
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"cannot connect to {url}")
        if isinstance(route, Exception):
            raise route
        return route

    def close(self):
        self.closed = True


@pytest.fixture
def stub_response():
    return StubResponse


@pytest.fixture
def stub_session():
    return StubSession
