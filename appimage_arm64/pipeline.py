from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .build_config import BuildConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildCtx:
    cfg: BuildConfig
    work_dir: Path
    output_dir: Path
    tag: Optional[str] = None
    version: Optional[str] = None
    skip_validate: bool = False
    github_token: Optional[str] = field(default=None, repr=False)

    @property
    def download_dir(self) -> Path:
        return self.work_dir / "downloads"

    @property
    def build_dir(self) -> Path:
        return self.work_dir / "build"

    @property
    def tools_dir(self) -> Path:
        return self.work_dir / "tools"

    @property
    def appdir(self) -> Path:
        return self.build_dir / "AppDir"

    @property
    def arm_dir(self) -> Path:
        return self.build_dir / "arm"

    @property
    def verify_dir(self) -> Path:
        return self.build_dir / "verify"

    @property
    def appimagetool_path(self) -> Path:
        return self.tools_dir / Path(self.cfg.appimagetool_url).name

    def ensure_dirs(self) -> None:
        for p in (self.work_dir, self.output_dir, self.download_dir, self.build_dir, self.tools_dir):
            p.mkdir(parents=True, exist_ok=True)


class Step(Protocol):
    """A single pipeline stage."""

    step_id: str

    def run(self, ctx: BuildCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(*, ctx: BuildCtx, steps: Sequence[Step], state: Optional[Dict[str, Any]] = None) -> PipelineResult:
    """Run steps in order; the first exception aborts the build."""

    state = state if state is not None else {}
    ran: List[str] = []

    for step in steps:
        state["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)

    state["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
