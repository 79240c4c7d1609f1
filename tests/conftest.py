# tests/conftest.py
from __future__ import annotations
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional

import pytest

from skillsync.apps.bootstrap import init_ctx
from skillsync.services.agent_context import clear_ctx
from skillsync.services.settings import Settings

_ENV_KEYS = (
    "SKILLSYNC_SCAN_ROOT",
    "SKILLSYNC_DEST",
    "SKILLSYNC_CONFIG",
    "SKILLSYNC_MARKER",
    "SKILLSYNC_IGNORE",
    "SKILLSYNC_LOG_LEVEL",
    "SKILLSYNC_CLI_DEBUG",
)


# ---------- CLI application fixture ----------
@pytest.fixture
def cli_app():
    from skillsync.apps.cli.app import app

    return app


@pytest.fixture
def scan_root(tmp_path) -> Path:
    root = tmp_path / "scan"
    root.mkdir()
    return root


@pytest.fixture
def dest(tmp_path) -> Path:
    return tmp_path / "dest"


@pytest.fixture
def make_skill():
    """make_skill(root, "projA", "foo", {"a.txt": "hello"}) -> root/projA/.claude/skills/foo"""

    def _make(root: Path, project: str, name: str, files: Optional[Dict[str, str]] = None) -> Path:
        d = root / project / ".claude" / "skills" / name
        d.mkdir(parents=True, exist_ok=True)
        for rel, text in (files or {}).items():
            p = d / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return d

    return _make


# ---------- autouse: isolated settings + context for every test ----------
@pytest.fixture(autouse=True)
def _autocontext(tmp_path, tmp_path_factory, monkeypatch):
    base_dir = tmp_path / "base"
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SKILLSYNC_BASE_DIR", str(base_dir))
    # keep stray .env files of the developer's checkout out of the tests
    monkeypatch.chdir(tmp_path)

    settings = Settings.from_sources().with_overrides(scan_root=tmp_path / "scan", dest_dir=tmp_path / "dest")
    # the context's base dir lives outside tmp_path so tests see tmp_path untouched
    settings = replace(settings, base_dir=tmp_path_factory.mktemp("ctxbase").resolve())
    ctx = init_ctx(settings)
    try:
        yield ctx
    finally:
        clear_ctx()
