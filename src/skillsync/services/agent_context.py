# src/skillsync/services/agent_context.py
from __future__ import annotations
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional

from skillsync.services.settings import Settings
from skillsync.ports import EventBus, PathProvider

_CTX: ContextVar[Optional["AgentContext"]] = ContextVar("skillsync_agent_ctx", default=None)


def set_ctx(ctx: AgentContext) -> None:
    """Installs the current AgentContext (reachable through get_ctx)."""
    _CTX.set(ctx)


def get_ctx() -> AgentContext:
    """Returns the current AgentContext or raises if it was never initialized."""
    ctx = _CTX.get()
    if ctx is None:
        raise RuntimeError("AgentContext is not initialized. Call set_ctx(...) during app bootstrap.")
    return ctx


def clear_ctx() -> None:
    _CTX.set(None)


@dataclass(slots=True)
class AgentContext:
    settings: Settings
    paths: PathProvider
    bus: EventBus
