from .types import Event, MarkerSource, ActionKind, SyncAction
from .report import SyncReport

__all__ = ["Event", "MarkerSource", "ActionKind", "SyncAction", "SyncReport"]
