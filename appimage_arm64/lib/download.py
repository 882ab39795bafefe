from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import requests

from ..errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_file(
    url: str,
    out: str | Path,
    *,
    timeout: float = 300,
    session: Optional[requests.Session] = None,
) -> Path:
    """Download ``url`` to ``out`` unless a non-empty file is already there.

    Data is streamed to ``<out>.part`` and renamed on success so an
    interrupted transfer is never picked up as a finished download.
    """

    out_path = Path(out)
    if out_path.is_file() and out_path.stat().st_size > 0:
        logger.info("Reusing %s", out_path.name)
        return out_path

    if session is None:
        with requests.Session() as owned:
            return download_file(url, out_path, timeout=timeout, session=owned)

    logger.info("Downloading %s", out_path.name)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    part = out_path.with_name(out_path.name + ".part")

    try:
        with session.get(url, stream=True, timeout=timeout, allow_redirects=True) as r:
            r.raise_for_status()
            with part.open("wb") as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as e:
        part.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e

    os.replace(part, out_path)
    return out_path
