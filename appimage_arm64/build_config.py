from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_REPO = "bitwarden/clients"
DEFAULT_APPIMAGETOOL_URL = (
    "https://github.com/AppImage/AppImageKit/releases/download/continuous/appimagetool-aarch64.AppImage"
)


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def repo(self) -> str:
        return str(self._section("upstream").get("repo") or DEFAULT_REPO)

    @property
    def tag_prefix(self) -> str:
        return str(self._section("upstream").get("tag_prefix") or "desktop-v")

    @property
    def x64_asset_pattern(self) -> str:
        return str(
            self._section("upstream").get("x64_asset_pattern") or r"^Bitwarden-([0-9.]+)-x86_64\.AppImage$"
        )

    @property
    def arm64_asset_pattern(self) -> str:
        return str(
            self._section("upstream").get("arm64_asset_pattern") or r"^bitwarden_[0-9.]+_arm64\.tar\.gz$"
        )

    @property
    def appimagetool_url(self) -> str:
        return str(self._section("appimagetool").get("url") or DEFAULT_APPIMAGETOOL_URL)

    @property
    def appimagetool_arch(self) -> str:
        return str(self._section("appimagetool").get("arch") or "arm_aarch64")

    @property
    def output_name(self) -> str:
        return str(self._section("app").get("output_name") or "Bitwarden-{version}-aarch64.AppImage")

    @property
    def executables(self) -> List[str]:
        value = self._section("app").get("executables")
        if value is None:
            return ["AppRun", "bitwarden", "bitwarden-app"]
        return [str(v) for v in value]

    @property
    def verify_binary(self) -> str:
        return str(self._section("app").get("verify_binary") or "bitwarden-app")

    @property
    def arch_signature(self) -> str:
        return str(self._section("app").get("arch_signature") or "ARM aarch64")

    def _fetch_value(self, key: str, default: float) -> Any:
        # Numeric keys: 0 is a valid setting, so only a missing key falls back.
        value = self._section("fetch").get(key)
        return default if value is None else value

    @property
    def fetch_attempts(self) -> int:
        return int(self._fetch_value("attempts", 4))

    @property
    def fetch_initial_delay(self) -> float:
        return float(self._fetch_value("initial_delay", 2.0))

    @property
    def fetch_timeout(self) -> float:
        return float(self._fetch_value("timeout", 60))

    @property
    def required_commands(self) -> List[str]:
        value = self.raw.get("required_commands")
        if value is None:
            return ["file", "unsquashfs", "mksquashfs"]
        return [str(v) for v in value]


def load_build_config(path: Optional[str]) -> BuildConfig:
    """Load an optional YAML config; None means built-in defaults."""

    if not path:
        return BuildConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Build config not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"Build config must be YAML: {path}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in build config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Build config must contain a mapping/object: {path}")

    return BuildConfig(raw=raw)
