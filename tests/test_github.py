import pytest
import requests

from appimage_arm64.build_config import BuildConfig
from appimage_arm64.errors import ReleaseError
from appimage_arm64.lib import github
from appimage_arm64.lib.github import (
    fetch_release,
    parse_release,
    release_api_url,
    resolve_release,
    select_asset,
)

from conftest import FakeResponse, FakeSession


def test_release_api_url_prefers_tag_over_version():
    base = "https://api.github.com/repos/bitwarden/clients/releases"
    assert release_api_url("bitwarden/clients") == f"{base}/latest"
    assert release_api_url("bitwarden/clients", version="2026.1.1") == f"{base}/tags/desktop-v2026.1.1"
    assert (
        release_api_url("bitwarden/clients", tag="desktop-v2025.12.0", version="2026.1.1")
        == f"{base}/tags/desktop-v2025.12.0"
    )


def test_fetch_release_sends_token(release_payload):
    session = FakeSession([FakeResponse(payload=release_payload)])
    data = fetch_release("https://api.example/r", token="abc", session=session)
    assert data["tag_name"] == "desktop-v2026.1.1"
    headers = session.calls[0]["headers"]
    assert headers["Accept"] == "application/vnd.github+json"
    assert headers["Authorization"] == "Bearer abc"


def test_fetch_release_without_token_has_no_auth_header(release_payload):
    session = FakeSession([FakeResponse(payload=release_payload)])
    fetch_release("https://api.example/r", session=session)
    assert "Authorization" not in session.calls[0]["headers"]


def test_fetch_release_retries_with_doubling_delay(monkeypatch, release_payload):
    sleeps = []
    monkeypatch.setattr(github.time, "sleep", sleeps.append)
    session = FakeSession(
        [
            requests.ConnectionError("boom"),
            FakeResponse(status=502),
            FakeResponse(payload=release_payload),
        ]
    )
    data = fetch_release("https://api.example/r", attempts=4, initial_delay=2.0, session=session)
    assert data["tag_name"] == "desktop-v2026.1.1"
    assert sleeps == [2.0, 4.0]
    assert len(session.calls) == 3


def test_fetch_release_gives_up_after_bounded_attempts(monkeypatch):
    sleeps = []
    monkeypatch.setattr(github.time, "sleep", sleeps.append)
    session = FakeSession([FakeResponse(status=500)] * 3)
    with pytest.raises(ReleaseError, match="Failed to fetch release metadata"):
        fetch_release("https://api.example/r", attempts=3, initial_delay=1.0, session=session)
    assert sleeps == [1.0, 2.0]
    assert len(session.calls) == 3


@pytest.mark.parametrize("tag", [None, "", "null"])
def test_parse_release_rejects_missing_tag(tag):
    with pytest.raises(ReleaseError, match="Could not parse release tag"):
        parse_release({"tag_name": tag, "assets": []})


def test_select_asset_requires_full_match(release_payload):
    release = parse_release(release_payload)
    cfg = BuildConfig()
    asset = select_asset(release, cfg.x64_asset_pattern)
    assert asset is not None
    assert asset.name == "Bitwarden-2026.1.1-x86_64.AppImage"
    assert select_asset(release, r"nothing-here") is None


def test_resolve_release_derives_version(release_payload):
    cfg = BuildConfig()
    resolved = resolve_release(
        parse_release(release_payload),
        x64_pattern=cfg.x64_asset_pattern,
        arm64_pattern=cfg.arm64_asset_pattern,
    )
    assert resolved.tag == "desktop-v2026.1.1"
    assert resolved.version == "2026.1.1"
    assert resolved.x64.url == "https://example.invalid/x64.AppImage"
    assert resolved.arm64.name == "bitwarden_2026.1.1_arm64.tar.gz"


def test_resolve_release_fails_without_arm64_asset(release_payload):
    release_payload["assets"] = [a for a in release_payload["assets"] if "arm64" not in a["name"]]
    cfg = BuildConfig()
    with pytest.raises(ReleaseError, match="Required assets not found in desktop-v2026.1.1"):
        resolve_release(
            parse_release(release_payload),
            x64_pattern=cfg.x64_asset_pattern,
            arm64_pattern=cfg.arm64_asset_pattern,
        )


def test_fetch_release_retries_invalid_json(monkeypatch, release_payload):
    sleeps = []
    monkeypatch.setattr(github.time, "sleep", sleeps.append)
    session = FakeSession([FakeResponse(body=b"<html>rate limited</html>"), FakeResponse(payload=release_payload)])
    data = fetch_release("https://api.example/r", initial_delay=0.5, session=session)
    assert data["tag_name"] == "desktop-v2026.1.1"
    assert sleeps == [0.5]


def test_fetch_release_single_attempt_when_zero_configured(monkeypatch):
    monkeypatch.setattr(github.time, "sleep", lambda s: pytest.fail("no retry expected"))
    session = FakeSession([FakeResponse(status=500)])
    with pytest.raises(ReleaseError):
        fetch_release("https://api.example/r", attempts=0, session=session)
    assert len(session.calls) == 1


def test_fetch_release_closes_its_own_session(monkeypatch, release_payload):
    session = FakeSession([FakeResponse(payload=release_payload)])
    monkeypatch.setattr(requests, "Session", lambda: session)
    fetch_release("https://api.example/r")
    assert session.closed
