from __future__ import annotations
import os
from pathlib import Path

from skillsync.config import const
from skillsync.services.errors import DestinationError, LockHeldError


class DestinationLock:
    """
    Exclusive lock file inside the destination folder.
    Serializes concurrent runs so two of them never race to copy the same new skill.
    """

    def __init__(self, destination: Path, name: str = const.LOCK_FILE_NAME) -> None:
        self.path = Path(destination) / name
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as exc:
            raise LockHeldError(self.path) from exc
        except OSError as exc:
            raise DestinationError(self.path, "lock", exc) from exc
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(f"{os.getpid()}\n")
        self._held = True

    def release(self) -> None:
        if not self._held:
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        self._held = False

    def __enter__(self) -> "DestinationLock":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
