# src/skillsync/services/skill/sync.py
from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Set

from skillsync.config import const
from skillsync.domain import ActionKind, MarkerSource, SyncAction, SyncReport
from skillsync.ports import EventBus, TreeCopier
from skillsync.services.errors import DestinationError
from skillsync.services.eventbus import emit
from skillsync.services.fs import (
    DestinationLock,
    canonical,
    copy_tree_staged,
    ensure_dir,
    fold_name,
    is_within,
    list_subdirs,
    same_path,
    subdir_names,
)
from skillsync.services.settings import Settings
from skillsync.services.skill.scanner import iter_marker_sources

_log = logging.getLogger("skillsync.sync")

_EVENT_SOURCE = "skill.sync"


def owning_project(destination: Path, marker: str = const.MARKER_DIR_NAME) -> Path:
    """
    The project tree the destination belongs to: the parent of the nearest ancestor
    named ``marker``, or the destination itself when it sits in no marker directory.
    The user-level marker (``~/.claude``) is a global folder, not a project:
    there the marker directory itself is the owning tree.
    """
    dest = Path(canonical(destination))
    wanted = fold_name(marker)
    for parent in (dest, *dest.parents):
        if parent.name == wanted:
            project = parent.parent
            if same_path(project, Path.home()):
                return parent
            return project
    return dest


class SkillSynchronizer:
    """
    Single-pass scan-then-copy of skills from ``<project>/<marker>/<skills>/<name>`` folders
    into one destination. Pure logic: returns a :class:`SyncReport`, prints nothing.
    """

    def __init__(
        self,
        *,
        marker_name: str = const.MARKER_DIR_NAME,
        skills_dir_name: str = const.SKILLS_DIR_NAME,
        ignore_dirs: Iterable[str] = const.IGNORE_DIRS,
        bus: Optional[EventBus] = None,
        copier: TreeCopier = copy_tree_staged,
        use_lock: bool = True,
    ) -> None:
        self.marker_name = marker_name
        self.skills_dir_name = skills_dir_name
        self.ignore_dirs = tuple(ignore_dirs)
        self.bus = bus
        self.copier = copier
        self.use_lock = use_lock

    @classmethod
    def from_settings(cls, settings: Settings, *, bus: Optional[EventBus] = None, **kw) -> "SkillSynchronizer":
        return cls(
            marker_name=settings.marker_name,
            skills_dir_name=settings.skills_dir_name,
            ignore_dirs=settings.ignore_dirs,
            bus=bus,
            **kw,
        )

    def synchronize(
        self,
        scan_root: str | Path,
        destination: str | Path,
        *,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> SyncReport:
        """
        Copies every skill found under ``scan_root`` whose name is not yet in ``destination``.

        Raises :class:`DestinationError` if the destination cannot be created or listed and
        :class:`~skillsync.services.errors.LockHeldError` if another run holds it.
        Per-skill failures are recorded in the report and never raise.
        ``should_stop`` is polled between candidate copies only.
        """
        root = Path(scan_root).expanduser()
        dest = Path(destination).expanduser()
        try:
            ensure_dir(dest)
        except OSError as exc:
            raise DestinationError(dest, "create", exc) from exc

        report = SyncReport(scan_root=root, destination=dest)
        lock = DestinationLock(dest) if self.use_lock else contextlib.nullcontext()
        with lock:
            try:
                present = {fold_name(n) for n in subdir_names(dest)}
            except OSError as exc:
                raise DestinationError(dest, "list", exc) from exc
            emit(self.bus, "sync.started", {"scan_root": str(root), "destination": str(dest), "present": len(present)}, _EVENT_SOURCE)
            self._run(root, dest, present, report, should_stop)

        emit(self.bus, "sync.finished", report.as_dict(), _EVENT_SOURCE)
        return report

    # -------- internals --------

    def _run(
        self,
        root: Path,
        dest: Path,
        present: Set[str],
        report: SyncReport,
        should_stop: Optional[Callable[[], bool]],
    ) -> None:
        owner = owning_project(dest, self.marker_name)
        sources = iter_marker_sources(
            root,
            marker=self.marker_name,
            skills_dir_name=self.skills_dir_name,
            ignore=self.ignore_dirs,
            prune=lambda p: fold_name(p.name) == fold_name(dest.name) and same_path(p, dest),
        )
        for source in sources:
            if is_within(source.marker, owner):
                report.record(SyncAction(ActionKind.EXCLUDED, "", source.marker))
                emit(self.bus, "source.excluded", {"marker": str(source.marker), "owner": str(owner)}, _EVENT_SOURCE)
                continue
            report.sources += 1
            if not self._sync_source(source, dest, present, report, should_stop):
                report.cancelled = True
                emit(self.bus, "sync.cancelled", report.as_dict(), _EVENT_SOURCE)
                return

    def _sync_source(
        self,
        source: MarkerSource,
        dest: Path,
        present: Set[str],
        report: SyncReport,
        should_stop: Optional[Callable[[], bool]],
    ) -> bool:
        """Returns False when the run was cancelled."""
        try:
            candidates = list_subdirs(source.skills)
        except OSError as exc:
            _log.debug("scan.skip", extra={"extra": {"path": str(source.skills), "error": str(exc)}})
            return True

        for candidate in candidates:
            if should_stop is not None and should_stop():
                return False
            name = candidate.name
            if fold_name(name) in present:
                report.record(SyncAction(ActionKind.SKIPPED, name, candidate, dest / name))
                emit(self.bus, "skill.skipped", {"name": name, "source": str(candidate)}, _EVENT_SOURCE)
                continue
            try:
                target = self.copier(candidate, dest, name)
            except OSError as exc:
                report.record(SyncAction(ActionKind.FAILED, name, candidate, dest / name, error=str(exc)))
                emit(self.bus, "skill.failed", {"name": name, "source": str(candidate), "error": str(exc)}, _EVENT_SOURCE)
                continue
            present.add(fold_name(name))
            report.record(SyncAction(ActionKind.COPIED, name, candidate, target))
            emit(self.bus, "skill.copied", {"name": name, "source": str(candidate), "target": str(target)}, _EVENT_SOURCE)
        return True


def synchronize(
    scan_root: str | Path,
    destination: str | Path,
    *,
    bus: Optional[EventBus] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    **kw,
) -> SyncReport:
    return SkillSynchronizer(bus=bus, **kw).synchronize(scan_root, destination, should_stop=should_stop)
