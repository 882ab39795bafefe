from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from ..errors import ReleaseError

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"


@dataclass(frozen=True)
class Asset:
    name: str
    url: str


@dataclass(frozen=True)
class ReleaseInfo:
    tag: str
    assets: List[Asset]


@dataclass(frozen=True)
class ResolvedRelease:
    tag: str
    version: str
    x64: Asset
    arm64: Asset


def release_api_url(
    repo: str,
    *,
    tag: Optional[str] = None,
    version: Optional[str] = None,
    tag_prefix: str = "desktop-v",
) -> str:
    """Return the Releases API URL; an explicit tag wins over a version."""

    base = f"{API_ROOT}/repos/{repo}/releases"
    if tag:
        return f"{base}/tags/{tag}"
    if version:
        return f"{base}/tags/{tag_prefix}{version}"
    return f"{base}/latest"


def _headers(token: Optional[str]) -> Dict[str, str]:
    h = {"Accept": "application/vnd.github+json"}
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


def fetch_release(
    url: str,
    *,
    token: Optional[str] = None,
    attempts: int = 4,
    initial_delay: float = 2.0,
    timeout: float = 60,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """GET release metadata, retrying with a doubling delay between attempts."""

    if session is None:
        with requests.Session() as owned:
            return fetch_release(
                url,
                token=token,
                attempts=attempts,
                initial_delay=initial_delay,
                timeout=timeout,
                session=owned,
            )

    delay = initial_delay
    last_error: Optional[Exception] = None

    for attempt in range(1, max(1, attempts) + 1):
        try:
            r = session.get(url, headers=_headers(token), timeout=timeout)
            r.raise_for_status()
            data = r.json()
            if not isinstance(data, dict):
                raise ReleaseError(f"Unexpected release payload from {url}")
            return data
        except (requests.RequestException, ValueError) as e:
            last_error = e
            if attempt >= attempts:
                break
            logger.warning(
                "Release metadata fetch failed (attempt %d/%d): %s; retrying in %.1fs",
                attempt,
                attempts,
                e,
                delay,
            )
            time.sleep(delay)
            delay *= 2

    raise ReleaseError(f"Failed to fetch release metadata from {url}: {last_error}")


def parse_release(data: Dict[str, Any]) -> ReleaseInfo:
    tag = data.get("tag_name")
    if not isinstance(tag, str) or not tag or tag == "null":
        raise ReleaseError("Could not parse release tag")

    assets: List[Asset] = []
    for a in data.get("assets") or []:
        name = a.get("name") or ""
        url = a.get("browser_download_url") or ""
        if name and url:
            assets.append(Asset(name=name, url=url))
    return ReleaseInfo(tag=tag, assets=assets)


def select_asset(release: ReleaseInfo, pattern: str) -> Optional[Asset]:
    rx = re.compile(pattern)
    for a in release.assets:
        if rx.fullmatch(a.name):
            return a
    return None


def resolve_release(release: ReleaseInfo, *, x64_pattern: str, arm64_pattern: str) -> ResolvedRelease:
    """Pick the two build inputs and derive the upstream version.

    The version is the first capture group of ``x64_pattern``.
    """

    x64 = select_asset(release, x64_pattern)
    arm64 = select_asset(release, arm64_pattern)
    if x64 is None or arm64 is None:
        raise ReleaseError(f"Required assets not found in {release.tag}")

    m = re.fullmatch(x64_pattern, x64.name)
    version = m.group(1) if m and m.groups() else ""
    if not version:
        raise ReleaseError(f"Could not derive version from {x64.name}")

    return ResolvedRelease(tag=release.tag, version=version, x64=x64, arm64=arm64)
