from __future__ import annotations
import errno
import os
import shutil
import sys
import tempfile
from pathlib import Path, PurePath
from typing import List, Set

from skillsync.config import const

_CASE_INSENSITIVE = sys.platform in ("win32", "darwin")


def canonical(path: str | Path) -> PurePath:
    """realpath(), case-folded where the platform's default filesystem ignores case."""
    p = os.path.realpath(os.path.expanduser(str(path)))
    if _CASE_INSENSITIVE:
        p = p.casefold()
    return PurePath(p)


def fold_name(name: str) -> str:
    return name.casefold() if _CASE_INSENSITIVE else name


def is_within(path: str | Path, root: str | Path) -> bool:
    """Path containment over canonical paths (``path == root`` counts as inside)."""
    p, r = canonical(path), canonical(root)
    try:
        p.relative_to(r)
        return True
    except ValueError:
        return False


def same_path(a: str | Path, b: str | Path) -> bool:
    return canonical(a) == canonical(b)


def ensure_dir(path: Path) -> Path:
    # FileExistsError if a non-directory already sits at path
    path.mkdir(parents=True, exist_ok=True)
    return path


def subdir_names(path: Path) -> Set[str]:
    """Names of the immediate subdirectories of ``path`` (symlinks to directories count)."""
    with os.scandir(path) as it:
        return {entry.name for entry in it if entry.is_dir()}


def list_subdirs(path: Path) -> List[Path]:
    """Immediate, non-hidden subdirectories of ``path`` sorted by name."""
    with os.scandir(path) as it:
        names = sorted(entry.name for entry in it if entry.is_dir() and not entry.name.startswith("."))
    return [path / name for name in names]


def copy_tree_staged(src: Path, dest_parent: Path, name: str) -> Path:
    """
    Copy ``src`` to ``dest_parent/name`` without ever leaving a partial tree under ``name``:
    the tree is built in a hidden staging directory next to the target and renamed into place.
    Never replaces an existing entry.
    """
    target = dest_parent / name
    if os.path.lexists(target):
        raise FileExistsError(errno.EEXIST, "target already exists", str(target))

    staging = Path(tempfile.mkdtemp(prefix=f"{const.STAGING_PREFIX}{name}-", dir=str(dest_parent)))
    try:
        payload = staging / name
        shutil.copytree(src, payload, symlinks=True)
        if os.path.lexists(target):
            raise FileExistsError(errno.EEXIST, "target already exists", str(target))
        os.rename(payload, target)
    finally:
        shutil.rmtree(staging, ignore_errors=True)
    return target
