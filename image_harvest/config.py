"""Configuration objects and constants for the image harvester."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .errors import InvalidInput

DEFAULT_SETTLE_SECONDS = 2.0
DEFAULT_EXTENSION = ".jpg"
CHUNK_SIZE = 8192


class SettleStrategy(str, Enum):
    """How the driver decides the page has finished rendering."""

    FIXED = "fixed"
    NETWORK_IDLE = "networkidle"
    SELECTOR = "selector"


@dataclass
class HarvestConfig:
    """Top-level settings that control rendering and downloading."""

    page_url: str
    output_root: Path
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    settle_strategy: SettleStrategy = SettleStrategy.FIXED
    settle_selector: Optional[str] = None
    navigation_timeout: float = 30.0
    headless: bool = True
    user_profile_dir: Optional[Path] = None
    browser_args: Tuple[str, ...] = ()
    request_timeout: Optional[float] = None

    def validate(self) -> None:
        if not self.page_url:
            raise InvalidInput("a page URL is required")
        if self.settle_seconds < 0:
            raise InvalidInput(f"settle delay must not be negative: {self.settle_seconds}")
        if self.navigation_timeout <= 0:
            raise InvalidInput(
                f"navigation timeout must be positive: {self.navigation_timeout}"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise InvalidInput(f"request timeout must be positive: {self.request_timeout}")
        if self.settle_strategy is SettleStrategy.SELECTOR and not self.settle_selector:
            raise InvalidInput("the selector settle strategy needs a CSS selector")
