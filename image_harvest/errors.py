"""Exception hierarchy raised by the harvesting pipeline."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for every error raised by image_harvest."""


class InvalidInput(HarvestError):
    """Required input is missing or a setting is out of range."""


class DirectoryCreateFailed(HarvestError):
    """The output directory could not be created."""


class PageURLInvalid(HarvestError):
    """The page URL is not a usable absolute URL."""


class SessionFailed(HarvestError):
    """Launching, navigating or evaluating in the browser failed."""


class SourceUnresolvable(HarvestError):
    """An ``img`` source value could not be parsed as a URL reference."""


class DownloadFailed(HarvestError):
    """A single image could not be fetched or written."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
