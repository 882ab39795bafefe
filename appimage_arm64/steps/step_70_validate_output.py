from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import CommandError, ValidationError
from ..lib.appimage import appimage_offset, is_arch
from ..lib.squashfs import extract_squashfs
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class ValidateOutputStep:
    step_id = "70_validate_output"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if ctx.skip_validate:
            logger.info("Skipping output validation")
            state["validated"] = False
            return state

        out = state.get("output")
        if out is None:
            raise RuntimeError("output missing; run build step first")
        signature = ctx.cfg.arch_signature

        logger.info("Validating output")
        if not is_arch(out, signature):
            raise ValidationError(f"Output is not {signature}")

        try:
            offset = appimage_offset(out)
        except CommandError as e:
            raise ValidationError(
                f"Cannot run {out} to read its offset; rerun on aarch64 or with --skip-validate"
            ) from e
        extract_squashfs(out, ctx.verify_dir, offset=offset, no_xattrs=True)

        binary = ctx.cfg.verify_binary
        if not is_arch(ctx.verify_dir / binary, signature):
            raise ValidationError(f"Embedded {binary} is not {signature}")

        state["validated"] = True
        return state
