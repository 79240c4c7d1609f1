# src/skillsync/domain/report.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .types import ActionKind, SyncAction


@dataclass(slots=True)
class SyncReport:
    """
    Result of one synchronization run.
    Counters are derived from the ordered action log, so they can never drift from it.
    """

    scan_root: Path
    destination: Path
    sources: int = 0
    actions: List[SyncAction] = field(default_factory=list)
    cancelled: bool = False

    def record(self, action: SyncAction) -> SyncAction:
        self.actions.append(action)
        return action

    def _count(self, kind: ActionKind) -> int:
        return sum(1 for a in self.actions if a.kind is kind)

    @property
    def copied(self) -> int:
        return self._count(ActionKind.COPIED)

    @property
    def skipped(self) -> int:
        return self._count(ActionKind.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(ActionKind.FAILED)

    @property
    def excluded(self) -> int:
        return self._count(ActionKind.EXCLUDED)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "scan_root": str(self.scan_root),
            "destination": str(self.destination),
            "sources": self.sources,
            "copied": self.copied,
            "skipped": self.skipped,
            "failed": self.failed,
            "excluded": self.excluded,
            "cancelled": self.cancelled,
        }
