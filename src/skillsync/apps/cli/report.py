# src/skillsync/apps/cli/report.py
from __future__ import annotations
from typing import Optional

from rich.console import Console
from rich.markup import escape

from skillsync.domain import ActionKind, SyncAction, SyncReport

_STYLE = {
    ActionKind.COPIED: ("green", "copied"),
    ActionKind.SKIPPED: ("yellow", "skipped"),
    ActionKind.FAILED: ("red", "failed"),
    ActionKind.EXCLUDED: ("dim", "excluded"),
}


def format_action(action: SyncAction) -> str:
    color, label = _STYLE[action.kind]
    if action.kind is ActionKind.EXCLUDED:
        return f"[{color}]{label:<8}[/{color}] {escape(str(action.source))} (inside the destination's own project)"
    line = f"[{color}]{label:<8}[/{color}] {escape(action.name)}  <- {escape(str(action.source))}"
    if action.error:
        line += f"  [{color}]({escape(action.error)})[/{color}]"
    return line


def format_summary(report: SyncReport) -> str:
    parts = [
        f"sources: {report.sources}",
        f"copied: [green]{report.copied}[/green]",
        f"skipped: [yellow]{report.skipped}[/yellow]",
    ]
    if report.failed:
        parts.append(f"failed: [red]{report.failed}[/red]")
    if report.excluded:
        parts.append(f"excluded: {report.excluded}")
    return ", ".join(parts)


def render_report(report: SyncReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(f"Scanning [bold]{escape(str(report.scan_root))}[/bold] -> [bold]{escape(str(report.destination))}[/bold]")
    for action in report.actions:
        console.print(format_action(action))
    if report.cancelled:
        console.print("[red]Cancelled before all skills were processed.[/red]")
    console.print(format_summary(report))
