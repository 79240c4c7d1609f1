# src/skillsync/apps/bootstrap.py
from __future__ import annotations
from typing import Optional
from threading import RLock

from skillsync.services.settings import Settings
from skillsync.services.errors import BaseDirError
from skillsync.services.agent_context import AgentContext, set_ctx
from skillsync.adapters.fs.path_provider import PathProvider
from skillsync.services.eventbus import LocalEventBus
from skillsync.services.logging import setup_logging, attach_event_logger


class _CtxHolder:
    _ctx: Optional[AgentContext] = None
    _lock = RLock()

    @classmethod
    def init(cls, settings: Optional[Settings] = None, *, stream_level: Optional[str] = None) -> AgentContext:
        with cls._lock:
            cls._ctx = cls._build(settings or Settings.from_sources(), stream_level=stream_level)
            set_ctx(cls._ctx)
            return cls._ctx

    @staticmethod
    def _build(settings: Settings, *, stream_level: Optional[str] = None) -> AgentContext:
        paths = PathProvider.from_settings(settings)
        try:
            paths.ensure_tree()
        except OSError as exc:
            raise BaseDirError(paths.base_dir(), "create", exc) from exc

        bus = LocalEventBus()
        try:
            root_logger = setup_logging(paths, settings.log_level, stream_level=stream_level)
        except OSError as exc:
            raise BaseDirError(paths.logs_dir(), "open log file in", exc) from exc
        attach_event_logger(bus, root_logger.getChild("events"))

        return AgentContext(settings=settings, paths=paths, bus=bus)


def init_ctx(settings: Optional[Settings] = None, *, stream_level: Optional[str] = None) -> AgentContext:
    return _CtxHolder.init(settings, stream_level=stream_level)
