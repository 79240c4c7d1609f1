# src/skillsync/domain/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class Event:
    type: str
    payload: Mapping[str, Any]
    source: str
    ts: float


@dataclass(frozen=True, slots=True)
class MarkerSource:
    """A marker directory (``.claude``) together with its ``skills`` folder."""

    marker: Path
    skills: Path


class ActionKind(str, Enum):
    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"
    EXCLUDED = "excluded"


@dataclass(frozen=True, slots=True)
class SyncAction:
    kind: ActionKind
    name: str  # skill name; empty for excluded sources
    source: Path
    target: Optional[Path] = None
    error: Optional[str] = None
