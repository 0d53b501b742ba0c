"""Lookup of the current user's Chrome profile directory."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger("image_harvest.profile")


def chrome_profile_dir() -> Optional[Path]:
    """Return the default Chrome profile directory for this platform, if known."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        logger.warning("Could not determine the user's home directory: %s", exc)
        return None

    if sys.platform.startswith("win"):
        local_app_data = os.getenv("LOCALAPPDATA")
        if not local_app_data:
            return None
        return Path(local_app_data) / "Google" / "Chrome" / "User Data" / "Default"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "Google" / "Chrome" / "Default"
    if sys.platform.startswith("linux"):
        return home / ".config" / "google-chrome" / "Default"
    return None


def resolve_profile_dir(
    explicit: Optional[Path] = None,
    discover: bool = True,
) -> Optional[Path]:
    """Choose the profile directory handed to the browser.

    An explicit directory always wins. Otherwise the platform default is used
    when it exists; if it cannot be found the browser runs with a throwaway
    profile and a warning is logged.
    """
    if explicit is not None:
        return explicit.expanduser()
    if not discover:
        return None
    candidate = chrome_profile_dir()
    if candidate is None or not candidate.is_dir():
        logger.warning("Chrome profile directory not found; launching with a default profile.")
        return None
    logger.debug("Using Chrome profile at %s", candidate)
    return candidate
