from __future__ import annotations

import logging
import shutil
from typing import Any, Dict

from ..lib.squashfs import extract_squashfs, find_squashfs_offset
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class ExtractAppDirStep:
    step_id = "40_extract_appdir"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        x64_appimage = (state.get("paths") or {}).get("x64_appimage")
        if x64_appimage is None:
            raise RuntimeError("paths.x64_appimage missing; run download step first")

        # Downloads survive between runs; build trees never do.
        for p in (ctx.appdir, ctx.arm_dir, ctx.verify_dir):
            if p.exists():
                shutil.rmtree(p)

        offset = find_squashfs_offset(x64_appimage)
        logger.info("Extracting AppDir from x64 AppImage (offset %d)", offset)
        extract_squashfs(x64_appimage, ctx.appdir, offset=offset)

        state["offset"] = offset
        return state
