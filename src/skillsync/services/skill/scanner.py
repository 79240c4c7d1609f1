"""Discovery of marker directories (``<project>/.claude/skills``) under a scan root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from skillsync.config import const
from skillsync.domain import MarkerSource

_log = logging.getLogger("skillsync.scan")


def _on_walk_error(err: OSError) -> None:
    # unreadable subtree: skip it, keep scanning the rest
    _log.debug("scan.skip", extra={"extra": {"path": getattr(err, "filename", None), "error": str(err)}})


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as err:
        _on_walk_error(err)
        return False


def iter_marker_sources(
    scan_root: Path,
    *,
    marker: str = const.MARKER_DIR_NAME,
    skills_dir_name: str = const.SKILLS_DIR_NAME,
    ignore: Iterable[str] = const.IGNORE_DIRS,
    prune: Optional[Callable[[Path], bool]] = None,
) -> Iterator[MarkerSource]:
    """
    Walks ``scan_root`` top-down in sorted order and yields every ``marker`` directory
    that directly contains a ``skills_dir_name`` directory.

    Not descended into: yielded marker directories, names in ``ignore``,
    directories for which ``prune(path)`` is true, and symlinked directories.
    """
    ignore_set = set(ignore)
    for dirpath, dirnames, _files in os.walk(scan_root, topdown=True, onerror=_on_walk_error, followlinks=False):
        current = Path(dirpath)
        keep: list[str] = []
        for name in sorted(dirnames):
            child = current / name
            if name == marker:
                skills = child / skills_dir_name
                if _is_dir(skills):
                    yield MarkerSource(marker=child, skills=skills)
                    continue
            if name in ignore_set:
                continue
            if prune is not None and prune(child):
                continue
            keep.append(name)
        dirnames[:] = keep
