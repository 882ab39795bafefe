from __future__ import annotations

from typing import Sequence


class BuildError(RuntimeError):
    """Fatal build failure; the CLI reports the message and exits nonzero."""


class MissingDependencyError(BuildError):
    pass


class ConfigError(BuildError):
    pass


class ReleaseError(BuildError):
    pass


class DownloadError(BuildError):
    pass


class SquashfsError(BuildError):
    pass


class ValidationError(BuildError):
    pass


class CommandError(BuildError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str, message: str) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
