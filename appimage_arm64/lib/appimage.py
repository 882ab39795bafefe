from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Mapping

from ..errors import CommandError, ValidationError
from .command import run_cmd

logger = logging.getLogger(__name__)


def build_appimage(tool: str | Path, appdir: str | Path, out: str | Path, *, arch: str = "arm_aarch64") -> Path:
    """Pack ``appdir`` into ``out`` with appimagetool for ``arch``."""

    # Extract-and-run lets the tool work without FUSE (CI containers).
    run_cmd(
        [str(tool), str(appdir), str(out)],
        env={"ARCH": arch, "APPIMAGE_EXTRACT_AND_RUN": "1"},
    )
    out_path = Path(out)
    if not out_path.is_file():
        raise ValidationError(f"appimagetool did not produce {out_path}")
    return out_path


def appimage_offset(appimage: str | Path) -> int:
    """Ask the AppImage runtime where its filesystem image starts."""

    r = run_cmd([str(appimage), "--appimage-offset"])
    text = (r.stdout or "").strip()
    try:
        return int(text.splitlines()[-1])
    except (IndexError, ValueError) as e:
        raise ValidationError(f"Unexpected --appimage-offset output from {appimage}: {text!r}") from e


def describe_file(path: str | Path) -> str:
    return run_cmd(["file", "-b", str(path)]).stdout.strip()


def is_arch(path: str | Path, needle: str = "ARM aarch64") -> bool:
    try:
        desc = describe_file(path)
    except CommandError:
        return False
    logger.debug("file %s: %s", path, desc)
    return needle.lower() in desc.lower()


def sha256_file(path: str | Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def write_checksum_file(path: str | Path, digest: str, name: str) -> Path:
    """Write a sha256sum-compatible line: ``<hex>  <name>``."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(f"{digest}  {name}\n", encoding="utf-8")
    return p


def write_build_env(path: str | Path, values: Mapping[str, str]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    lines = [f"{k}={v}" for k, v in values.items()]
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p

