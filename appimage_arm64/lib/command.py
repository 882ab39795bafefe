from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence

from ..errors import CommandError, MissingDependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr; both are logged at DEBUG.
    - check=True raises CommandError on a nonzero exit.
    """

    argv_list = [str(a) for a in argv]
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            errors="replace",
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        raise MissingDependencyError(f"Missing required command: {argv_list[0]}") from e
    except OSError as e:
        # ENOEXEC for foreign-arch binaries without binfmt, EACCES for non-executables.
        raise CommandError(argv_list, -1, str(e), f"Cannot run {_fmt_argv(argv_list)}: {e}") from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(
            argv_list,
            p.returncode,
            p.stderr,
            f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr.strip()}",
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def missing_commands(names: Iterable[str]) -> List[str]:
    return [n for n in names if shutil.which(n) is None]


def require_commands(names: Iterable[str]) -> None:
    """Fail on the first command not found on PATH."""

    for name in missing_commands(names):
        raise MissingDependencyError(f"Missing required command: {name}")
