from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.assets import extract_tarball, make_executable, overlay_tree
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class OverlayPayloadStep:
    step_id = "50_overlay_payload"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        tarball = (state.get("paths") or {}).get("arm64_tarball")
        if tarball is None:
            raise RuntimeError("paths.arm64_tarball missing; run download step first")

        logger.info("Extracting arm64 tarball")
        extract_tarball(tarball, ctx.arm_dir)

        logger.info("Overlaying arm64 payload")
        count = overlay_tree(ctx.arm_dir, ctx.appdir)
        logger.debug("Overlaid %d entries onto %s", count, ctx.appdir)

        make_executable(ctx.appdir / name for name in ctx.cfg.executables)
        return state
