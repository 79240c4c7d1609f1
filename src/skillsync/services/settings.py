# src/skillsync/services/settings.py
from __future__ import annotations
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values

from skillsync.config import const
from skillsync.services.errors import ConfigError


_STRING_KEYS = {"scan_root", "dest_dir", "marker_name", "skills_dir_name", "log_level"}


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigError(path, "top level must be a mapping")
    for key, value in data.items():
        if value is None or isinstance(value, str):
            continue
        if key == "ignore_dirs" and isinstance(value, list):
            if not all(isinstance(v, str) for v in value):
                raise ConfigError(path, "ignore_dirs entries must be strings")
        elif key in _STRING_KEYS or key == "ignore_dirs":
            raise ConfigError(path, f"{key} must be a string, got {type(value).__name__}")
    return data


def _as_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _split_names(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return tuple(s.strip() for s in items if s and s.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    base_dir: Path
    scan_root: Path
    dest_dir: Path
    marker_name: str = const.MARKER_DIR_NAME
    skills_dir_name: str = const.SKILLS_DIR_NAME
    ignore_dirs: tuple[str, ...] = const.IGNORE_DIRS
    log_level: str = const.DEFAULT_LOG_LEVEL
    config_file: Optional[Path] = None

    @staticmethod
    def from_sources(env_file: Optional[str] = ".env") -> "Settings":
        """
        Priority (low -> high): constants, YAML config file, .env file, process environment.
        CLI flags are applied afterwards through :meth:`with_overrides`.
        """
        env_file_vars: Dict[str, Optional[str]] = {}
        if env_file and Path(env_file).is_file():
            env_file_vars = dotenv_values(env_file)

        def pick_env(key: str) -> Optional[str]:
            return os.environ.get(key) or env_file_vars.get(key) or None

        base = _as_path(pick_env("SKILLSYNC_BASE_DIR") or Path.home() / const.BASE_DIR_NAME)
        config_path = _as_path(pick_env("SKILLSYNC_CONFIG") or base / const.CONFIG_FILE_NAME)
        cfg = _load_config_file(config_path)

        def pick(env_key: Optional[str], cfg_key: str, default: Any) -> Any:
            if env_key:
                v = pick_env(env_key)
                if v:
                    return v
            v = cfg.get(cfg_key)
            return default if v in (None, "") else v

        scan_root = _as_path(pick("SKILLSYNC_SCAN_ROOT", "scan_root", Path.home()))
        dest_dir = _as_path(pick("SKILLSYNC_DEST", "dest_dir", base / const.DEST_DIR_NAME))
        ignore = pick("SKILLSYNC_IGNORE", "ignore_dirs", const.IGNORE_DIRS)

        return Settings(
            base_dir=base,
            scan_root=scan_root,
            dest_dir=dest_dir,
            marker_name=str(pick("SKILLSYNC_MARKER", "marker_name", const.MARKER_DIR_NAME)),
            skills_dir_name=str(pick(None, "skills_dir_name", const.SKILLS_DIR_NAME)),
            ignore_dirs=_split_names(ignore),
            log_level=str(pick("SKILLSYNC_LOG_LEVEL", "log_level", const.DEFAULT_LOG_LEVEL)).upper(),
            config_file=config_path if cfg else None,
        )

    def with_overrides(self, **kw) -> "Settings":
        # only the two command-line parameters may be overridden
        safe = {k: _as_path(v) for k, v in kw.items() if k in {"scan_root", "dest_dir"} and v is not None}
        return replace(self, **safe)
