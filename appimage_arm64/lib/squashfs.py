"""SquashFS helpers for AppImages.

An AppImage is an ELF runtime followed by a SquashFS image. The image offset
is not recorded anywhere we can read without running the runtime, so we scan
for the superblock magic and let ``unsquashfs -s`` confirm each candidate.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..errors import CommandError, SquashfsError
from .command import run_cmd

logger = logging.getLogger(__name__)

SQUASHFS_MAGIC = b"hsqs"
SCAN_CHUNK = 4 * 1024 * 1024


def scan_magic(path: str | Path, magic: bytes = SQUASHFS_MAGIC, *, chunk_size: int = SCAN_CHUNK) -> List[int]:
    """Return every byte offset of ``magic`` in ``path``, ascending."""

    offsets: List[int] = []
    overlap = len(magic) - 1
    base = 0
    tail = b""
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            buf = tail + chunk
            start = base - len(tail)
            idx = buf.find(magic)
            while idx != -1:
                offsets.append(start + idx)
                idx = buf.find(magic, idx + 1)
            tail = buf[-overlap:] if overlap else b""
            base += len(chunk)
    return offsets


def is_valid_offset(image: str | Path, offset: int) -> bool:
    r = run_cmd(["unsquashfs", "-s", "-offset", str(offset), str(image)], check=False)
    return r.returncode == 0


def find_squashfs_offset(image: str | Path) -> int:
    """First magic offset that unsquashfs accepts as a superblock."""

    candidates = scan_magic(image)
    if not candidates:
        raise SquashfsError(f"No SquashFS marker found in {image}")

    logger.debug("SquashFS marker candidates in %s: %s", image, candidates)
    for off in candidates:
        if is_valid_offset(image, off):
            return off

    raise SquashfsError(f"No valid SquashFS offset found in {image}")


def extract_squashfs(
    image: str | Path,
    dest: str | Path,
    *,
    offset: int,
    no_xattrs: bool = False,
) -> Path:
    argv = ["unsquashfs"]
    if no_xattrs:
        argv.append("-no-xattrs")
    argv += ["-d", str(dest), "-offset", str(offset), str(image)]
    try:
        run_cmd(argv)
    except CommandError as e:
        raise SquashfsError(f"Failed to extract SquashFS from {image} at offset {offset}") from e
    return Path(dest)
