"""Image downloading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests

from .config import CHUNK_SIZE
from .errors import DownloadFailed

logger = logging.getLogger("image_harvest.fetcher")


def download(
    url: str,
    output_dir: Path,
    file_name: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Path:
    """Fetch ``url`` and stream the body to ``output_dir / file_name``.

    Only a final 200 response is written; anything else raises
    ``DownloadFailed`` before the file is created. An existing file with the
    same name is overwritten. If the transfer breaks off midway the partial
    file stays on disk.
    """
    http = session or requests.Session()
    destination = output_dir / file_name
    try:
        with http.get(url, stream=True, timeout=timeout) as resp:
            if resp.status_code != requests.codes.ok:
                raise DownloadFailed(url, f"HTTP status is not OK: {resp.status_code} {resp.reason}")
            with destination.open("wb") as handle:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    handle.write(chunk)
    except requests.RequestException as exc:
        raise DownloadFailed(url, str(exc)) from exc
    except (OSError, ValueError) as exc:
        raise DownloadFailed(url, f"cannot write {destination}: {exc}") from exc
    finally:
        if session is None:
            http.close()
    logger.debug("Saved %s to %s", url, destination)
    return destination
