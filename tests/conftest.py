from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests


class FakeResponse:
    def __init__(self, status: int = 200, body: bytes = b"", payload: Any = None) -> None:
        self.status_code = status
        self._body = body
        self._payload = payload

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=None)

    def json(self) -> Any:
        if self._payload is None:
            return json.loads(self._body.decode("utf-8"))
        return self._payload

    def iter_content(self, chunk_size: int = 1) -> Any:
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i : i + chunk_size]


class FakeSession:
    """Replays queued responses (or exceptions) and records each call."""

    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc: object) -> None:
        self.closed = True

    def get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, "headers": headers or {}, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def release_payload() -> Dict[str, Any]:
    return {
        "tag_name": "desktop-v2026.1.1",
        "assets": [
            {
                "name": "Bitwarden-2026.1.1-x86_64.AppImage.blockmap",
                "browser_download_url": "https://example.invalid/blockmap",
            },
            {
                "name": "Bitwarden-2026.1.1-x86_64.AppImage",
                "browser_download_url": "https://example.invalid/x64.AppImage",
            },
            {
                "name": "bitwarden_2026.1.1_arm64.tar.gz",
                "browser_download_url": "https://example.invalid/arm64.tar.gz",
            },
            {
                "name": "bitwarden_2026.1.1_amd64.deb",
                "browser_download_url": "https://example.invalid/amd64.deb",
            },
        ],
    }
