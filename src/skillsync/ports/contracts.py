from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Protocol

from skillsync.domain import Event


class EventBus(Protocol):
    def subscribe(self, type_prefix: str, handler: Callable[[Event], Any]) -> None: ...

    def publish(self, event: Event) -> None: ...


class TreeCopier(Protocol):
    """Copies ``src`` into ``dest_parent/name`` and returns the created path."""

    def __call__(self, src: Path, dest_parent: Path, name: str) -> Path: ...
