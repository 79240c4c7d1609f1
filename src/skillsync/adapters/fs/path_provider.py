# src/skillsync/adapters/fs/path_provider.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from skillsync.config import const
from skillsync.services.settings import Settings


@dataclass(frozen=True, slots=True)
class PathProvider:
    """Single source of truth for paths. Always works with pathlib.Path."""

    base: Path
    dest: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "PathProvider":
        return cls(
            base=Path(settings.base_dir).expanduser().resolve(),
            dest=Path(settings.dest_dir).expanduser().resolve(),
        )

    def base_dir(self) -> Path:
        return self.base

    def skills_dir(self) -> Path:
        return self.dest

    def logs_dir(self) -> Path:
        return (self.base / const.LOGS_DIR_NAME).resolve()

    def ensure_tree(self) -> None:
        # the destination is created by the synchronizer, where a failure is reported as fatal
        for p in (self.base_dir(), self.logs_dir()):
            p.mkdir(parents=True, exist_ok=True)
