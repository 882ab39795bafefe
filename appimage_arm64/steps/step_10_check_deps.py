from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.command import require_commands
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class CheckDependenciesStep:
    step_id = "10_check_deps"

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        commands = ctx.cfg.required_commands
        require_commands(commands)
        logger.debug("Required commands present: %s", ", ".join(commands))
        return state
