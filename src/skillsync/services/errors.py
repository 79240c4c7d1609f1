"""Error hierarchy for fatal (run-level) failures.

Per-item problems (an unreadable subtree, a skill that could not be copied)
never raise: they are recorded in the :class:`~skillsync.domain.SyncReport`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SkillSyncError(RuntimeError):
    """Base class for all fatal skillsync errors."""


class ConfigError(SkillSyncError):
    """Raised when a configuration source cannot be parsed."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"invalid config file {path}: {detail}")


class PathError(SkillSyncError):
    """A filesystem operation on a required path failed."""

    kind = "path"

    def __init__(self, path: Path, operation: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.operation = operation
        self.cause = cause
        message = f"cannot {operation} {self.kind} {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DestinationError(PathError):
    """Raised when the destination folder cannot be prepared or locked."""

    kind = "destination"


class BaseDirError(PathError):
    """Raised when the base directory (logs, config) cannot be prepared."""

    kind = "base directory"


class LockHeldError(SkillSyncError):
    """Raised when another run already holds the destination lock."""

    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        super().__init__(f"destination is locked by another run: {lock_path} (remove it if no run is active)")
