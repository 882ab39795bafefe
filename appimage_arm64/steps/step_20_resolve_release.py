from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..lib.github import fetch_release, parse_release, release_api_url, resolve_release
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class ResolveReleaseStep:
    step_id = "20_resolve_release"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        url = release_api_url(cfg.repo, tag=ctx.tag, version=ctx.version, tag_prefix=cfg.tag_prefix)

        logger.info("Fetching release metadata")
        data = fetch_release(
            url,
            token=ctx.github_token,
            attempts=cfg.fetch_attempts,
            initial_delay=cfg.fetch_initial_delay,
            timeout=cfg.fetch_timeout,
        )
        # Kept for debugging a failed asset match.
        (ctx.work_dir / "release.json").write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

        release = resolve_release(
            parse_release(data),
            x64_pattern=cfg.x64_asset_pattern,
            arm64_pattern=cfg.arm64_asset_pattern,
        )
        logger.info("Upstream release: %s", release.tag)
        logger.info("Resolved version: %s", release.version)

        state["release"] = release
        return state
