# src/skillsync/config/const.py
from __future__ import annotations

# fixed defaults (changed by developers in code, overridable via config/.env/ENV)
MARKER_DIR_NAME: str = ".claude"
SKILLS_DIR_NAME: str = "skills"

# directories never descended into while scanning
IGNORE_DIRS: tuple[str, ...] = (".git", "node_modules")

BASE_DIR_NAME: str = ".skillsync"
DEST_DIR_NAME: str = "skills"
LOGS_DIR_NAME: str = "logs"
LOG_FILE_NAME: str = "skillsync.log"
CONFIG_FILE_NAME: str = "config.yaml"

LOCK_FILE_NAME: str = ".skillsync.lock"
STAGING_PREFIX: str = ".skillsync-"

DEFAULT_LOG_LEVEL: str = "INFO"
