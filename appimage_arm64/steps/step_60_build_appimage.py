from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.appimage import build_appimage
from ..lib.assets import make_executable
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class BuildAppImageStep:
    step_id = "60_build_appimage"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        release = state.get("release")
        if release is None:
            raise RuntimeError("release missing; run resolve step first")
        tool = (state.get("paths") or {}).get("appimagetool")
        if tool is None:
            raise RuntimeError("paths.appimagetool missing; run download step first")
        if not ctx.appdir.is_dir():
            raise RuntimeError(f"{ctx.appdir} missing; run extract step first")

        out = ctx.output_dir / ctx.cfg.output_name.format(version=release.version, tag=release.tag)
        logger.info("Building output AppImage")
        build_appimage(tool, ctx.appdir, out, arch=ctx.cfg.appimagetool_arch)
        make_executable([out])

        state["output"] = out
        return state
