from __future__ import annotations

import logging
import os
import shutil
import stat
import tarfile
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


def extract_tarball(archive: str | Path, dest: str | Path) -> Path:
    """Extract a (compressed) tarball keeping symlinks and file modes."""

    d = Path(dest)
    d.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:*") as t:
        # "tar" filter keeps modes and links but refuses paths outside dest.
        t.extractall(d, filter="tar")
    return d


def _remove(p: Path) -> None:
    if p.is_symlink() or not p.is_dir():
        p.unlink()
    else:
        shutil.rmtree(p)


def overlay_tree(src: str | Path, dst: str | Path) -> int:
    """Copy the contents of ``src`` over ``dst`` like ``cp -a src/. dst/.``.

    Directories are merged, files and symlinks in ``src`` replace whatever is
    at the same path in ``dst``. Symlinks are copied as links. Returns the
    number of non-directory entries written.
    """

    s = Path(src)
    d = Path(dst)
    if not s.is_dir():
        raise FileNotFoundError(str(src))

    d.mkdir(parents=True, exist_ok=True)
    written = 0
    dirs: List[Path] = []

    for root, dirnames, filenames in os.walk(s):
        root_path = Path(root)
        rel_root = root_path.relative_to(s)

        for name in list(dirnames):
            item = root_path / name
            out = d / rel_root / name
            if item.is_symlink():
                # os.walk lists links to directories as dirs; copy them as links.
                dirnames.remove(name)
                filenames.append(name)
                continue
            if out.is_symlink() or (out.exists() and not out.is_dir()):
                _remove(out)
            out.mkdir(exist_ok=True)
            dirs.append(rel_root / name)

        for name in filenames:
            item = root_path / name
            out = d / rel_root / name
            if out.is_symlink() or out.exists():
                _remove(out)
            if item.is_symlink():
                os.symlink(os.readlink(item), out)
            else:
                shutil.copy2(item, out)
            written += 1

    # Copying into a directory bumps its mtime, so apply metadata last.
    for rel in reversed(dirs):
        shutil.copystat(s / rel, d / rel)
    shutil.copystat(s, d)

    return written


def make_executable(paths: Iterable[str | Path]) -> None:
    for p in paths:
        path = Path(p)
        if not path.exists():
            raise FileNotFoundError(str(path))
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
