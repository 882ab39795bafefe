from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .build_config import load_build_config
from .errors import BuildError
from .logging_utils import DEFAULT_LOG_NAME, configure_logging
from .pipeline import BuildCtx, run_pipeline
from .steps import (
    BuildAppImageStep,
    CheckDependenciesStep,
    DownloadAssetsStep,
    ExtractAppDirStep,
    OverlayPayloadStep,
    ResolveReleaseStep,
    ValidateOutputStep,
    WriteOutputsStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        CheckDependenciesStep(),
        ResolveReleaseStep(),
        DownloadAssetsStep(),
        ExtractAppDirStep(),
        OverlayPayloadStep(),
        BuildAppImageStep(),
        ValidateOutputStep(),
        WriteOutputsStep(),
    ]


def run(
    *,
    work_dir: str,
    output_dir: str,
    tag: Optional[str] = None,
    version: Optional[str] = None,
    skip_validate: bool = False,
    config_path: Optional[str] = None,
    log_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Run the repackaging pipeline and return the final build state."""

    work = Path(work_dir).absolute()
    configure_logging(log_path=log_path or str(work / DEFAULT_LOG_NAME))

    ctx = BuildCtx(
        cfg=load_build_config(config_path),
        work_dir=work,
        output_dir=Path(output_dir).absolute(),
        tag=tag or None,
        version=version or None,
        skip_validate=skip_validate,
        github_token=os.environ.get("GITHUB_TOKEN") or None,
    )
    ctx.ensure_dirs()

    result = run_pipeline(ctx=ctx, steps=build_steps())
    state = result.state
    state["ran_steps"] = result.ran_steps
    return state


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="appimage-arm64",
        description="Rebuild the upstream x86_64 AppImage as an aarch64 AppImage using the arm64 tarball.",
    )
    p.add_argument("--version", default=None, help="Build from a specific version (example: 2026.1.1)")
    p.add_argument("--tag", default=None, help="Build from a specific upstream tag (example: desktop-v2026.1.1)")
    p.add_argument("--work-dir", default=os.environ.get("WORK_DIR") or "work", help="Working directory (default: ./work)")
    p.add_argument(
        "--output-dir", default=os.environ.get("OUTPUT_DIR") or "dist", help="Output directory (default: ./dist)"
    )
    p.add_argument("--skip-validate", action="store_true", help="Skip output architecture checks")
    p.add_argument("--config", default=None, help="Optional YAML build config")
    p.add_argument("--log", default=None, help="Log file (default: <work-dir>/build.log)")

    args = p.parse_args(argv)

    try:
        state = run(
            work_dir=args.work_dir,
            output_dir=args.output_dir,
            tag=args.tag,
            version=args.version,
            skip_validate=bool(args.skip_validate),
            config_path=args.config,
            log_path=args.log,
        )
    except BuildError as e:
        logger.error("%s", e)
        return 1
    except Exception:
        logger.exception("Build failed")
        return 1

    print(f"Output: {state['output']}\nSHA256: {state['sha256']}\nTag: {state['release'].tag}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
