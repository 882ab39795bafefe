from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.assets import make_executable
from ..lib.download import download_file
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class DownloadAssetsStep:
    step_id = "30_download_assets"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        release = state.get("release")
        if release is None:
            raise RuntimeError("release missing; run resolve step first")

        paths = state.setdefault("paths", {})
        paths["x64_appimage"] = download_file(release.x64.url, ctx.download_dir / release.x64.name)
        paths["arm64_tarball"] = download_file(release.arm64.url, ctx.download_dir / release.arm64.name)
        paths["appimagetool"] = download_file(ctx.cfg.appimagetool_url, ctx.appimagetool_path)
        make_executable([paths["appimagetool"]])
        return state
