# src/skillsync/apps/cli/app.py
from __future__ import annotations

import functools
import os
import signal
import threading
import traceback
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv
import typer
from rich import print
from rich.markup import escape

# load .env once (SKILLSYNC_* variables)
load_dotenv(find_dotenv(usecwd=True))

from skillsync.apps.bootstrap import init_ctx
from skillsync.apps.cli.report import render_report
from skillsync.services.errors import SkillSyncError
from skillsync.services.settings import Settings
from skillsync.services.skill import SkillSynchronizer

app = typer.Typer(help="Collect skills from <project>/.claude/skills folders into one destination folder.", add_completion=False)

EXIT_FATAL = 1
EXIT_CANCELLED = 130


def _run_safe(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            if os.getenv("SKILLSYNC_CLI_DEBUG") == "1":
                traceback.print_exc()
            raise

    return wrapper


def _stream_level(settings: Settings) -> str:
    # console logs stay quiet unless debugging; the summary below is the user-facing output
    return settings.log_level if settings.log_level == "DEBUG" else "WARNING"


@app.command()
@_run_safe
def sync(
    scan_root: Optional[Path] = typer.Option(None, "--scan-root", "-s", help="Directory tree to scan (default: home or SKILLSYNC_SCAN_ROOT)"),
    dest: Optional[Path] = typer.Option(None, "--dest", "-d", help="Destination skills folder (default: ~/.skillsync/skills or SKILLSYNC_DEST)"),
):
    """
    Copy every skill from <project>/.claude/skills/<name> under SCAN_ROOT into DEST,
    unless a skill with that name is already there. Never deletes or overwrites.
    """
    stop = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda *_: stop.set())
    try:
        settings = Settings.from_sources().with_overrides(scan_root=scan_root, dest_dir=dest)
        if settings.scan_root.exists() and not settings.scan_root.is_dir():
            raise typer.BadParameter(f"not a directory: {settings.scan_root}", param_hint="--scan-root")
        ctx = init_ctx(settings, stream_level=_stream_level(settings))
        synchronizer = SkillSynchronizer.from_settings(settings, bus=ctx.bus)
        report = synchronizer.synchronize(settings.scan_root, settings.dest_dir, should_stop=stop.is_set)
    except SkillSyncError as exc:
        if os.getenv("SKILLSYNC_CLI_DEBUG") == "1":
            traceback.print_exc()
        print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=EXIT_FATAL)
    finally:
        signal.signal(signal.SIGINT, previous)

    render_report(report)
    if report.cancelled:
        raise typer.Exit(code=EXIT_CANCELLED)


if __name__ == "__main__":
    app()
