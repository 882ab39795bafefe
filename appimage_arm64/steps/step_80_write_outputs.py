from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.appimage import sha256_file, write_build_env, write_checksum_file
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)

BUILD_ENV_NAME = "build.env"


class WriteOutputsStep:
    step_id = "80_write_outputs"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        out = state.get("output")
        release = state.get("release")
        if out is None or release is None:
            raise RuntimeError("output or release missing; run build step first")

        sha = sha256_file(out)
        checksum = write_checksum_file(out.with_name(out.name + ".sha256"), sha, out.name)

        values = {
            "OUT_APPIMAGE": str(out),
            "UPSTREAM_TAG": release.tag,
            "UPSTREAM_VERSION": release.version,
            "OUT_SHA256": sha,
        }
        env_path = write_build_env(ctx.output_dir / BUILD_ENV_NAME, values)
        write_build_env(ctx.work_dir / BUILD_ENV_NAME, values)

        state["sha256"] = sha
        state.setdefault("paths", {}).update(checksum=checksum, build_env=env_path)
        logger.info("Done")
        return state
