"""Data models used throughout the harvesting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class ResolvedImage:
    """Image reference found in the DOM and resolved against the page URL."""

    index: int
    raw_src: str
    absolute_url: str

    @property
    def number(self) -> int:
        """1-based position used in log lines and fallback file names."""
        return self.index + 1


@dataclass(frozen=True)
class TargetFile:
    """Where a resolved image will be written."""

    image: ResolvedImage
    file_name: str
    output_dir: Path

    @property
    def path(self) -> Path:
        return self.output_dir / self.file_name


@dataclass
class HarvestReport:
    """Outcome counters for a single run."""

    page_url: str
    output_dir: Path
    discovered: int = 0
    skipped: int = 0
    resolved: int = 0
    failed: int = 0
    saved: List[Path] = field(default_factory=list)
    total_seconds: float = 0.0

    @property
    def downloaded(self) -> int:
        return len(self.saved)
