"""Behaviour of the scan-then-copy pass."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillsync.config import const
from skillsync.domain import ActionKind
from skillsync.services.errors import DestinationError, LockHeldError
from skillsync.services.eventbus import LocalEventBus
from skillsync.services.fs import copy_tree_staged, same_path
from skillsync.services.skill import SkillSynchronizer, owning_project, synchronize


def _snapshot(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_end_to_end_then_idempotent(scan_root, dest, make_skill):
    make_skill(scan_root, "projA", "foo", {"a.txt": "hello"})
    make_skill(scan_root, "projB", "bar")

    first = synchronize(scan_root, dest)

    assert (first.sources, first.copied, first.skipped) == (2, 2, 0)
    assert (dest / "foo" / "a.txt").read_text(encoding="utf-8") == "hello"
    assert (dest / "bar").is_dir()
    assert [a.name for a in first.actions] == ["foo", "bar"]
    state = _snapshot(dest)

    second = synchronize(scan_root, dest)

    assert (second.sources, second.copied, second.skipped) == (2, 0, 2)
    assert _snapshot(dest) == state
    assert sorted(p.name for p in dest.iterdir()) == ["bar", "foo"]


def test_existing_entries_are_never_changed(scan_root, dest, make_skill):
    (dest / "foo").mkdir(parents=True)
    (dest / "foo" / "a.txt").write_text("mine", encoding="utf-8")
    (dest / "unrelated").mkdir()
    (dest / "unrelated" / "notes.md").write_text("keep me", encoding="utf-8")
    (dest / "loose.txt").write_text("file", encoding="utf-8")
    before = _snapshot(dest)
    make_skill(scan_root, "projA", "foo", {"a.txt": "theirs", "extra.txt": "new"})

    report = synchronize(scan_root, dest)

    assert report.skipped == 1
    assert report.copied == 0
    assert _snapshot(dest) == before


def test_duplicate_name_across_sources_first_wins(scan_root, dest, make_skill):
    make_skill(scan_root, "projA", "foo", {"a.txt": "from A"})
    make_skill(scan_root, "projB", "foo", {"a.txt": "from B"})

    report = synchronize(scan_root, dest)

    assert (report.sources, report.copied, report.skipped) == (2, 1, 1)
    assert (dest / "foo" / "a.txt").read_text(encoding="utf-8") == "from A"
    assert [a.kind for a in report.actions] == [ActionKind.COPIED, ActionKind.SKIPPED]


def test_markers_inside_destination_project_are_excluded(scan_root, make_skill):
    own_dest = make_skill(scan_root, "owner", "existing").parent
    make_skill(scan_root / "owner", "sub", "nested")
    make_skill(scan_root, "other", "y")

    report = synchronize(scan_root, own_dest)

    assert report.sources == 1
    assert report.excluded == 2
    assert report.copied == 1
    assert (own_dest / "y").is_dir()
    assert not (own_dest / "nested").exists()
    excluded = {a.source for a in report.actions if a.kind is ActionKind.EXCLUDED}
    assert excluded == {scan_root / "owner" / ".claude", scan_root / "owner" / "sub" / ".claude"}


def test_prefix_sibling_is_not_treated_as_own_project(scan_root, make_skill):
    own_dest = make_skill(scan_root, "app", "existing").parent
    make_skill(scan_root, "app-extras", "tool")

    report = synchronize(scan_root, own_dest)

    assert report.copied == 1
    assert (own_dest / "tool").is_dir()


def test_user_level_marker_does_not_exclude_home(tmp_path, monkeypatch, make_skill):
    home = tmp_path / "home"
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    user_skills = home / ".claude" / "skills"
    user_skills.mkdir(parents=True)
    make_skill(home, "proj", "foo")

    assert same_path(owning_project(user_skills), home / ".claude")

    report = synchronize(home, user_skills)

    assert report.copied == 1
    assert report.excluded == 1
    assert (user_skills / "foo").is_dir()


def test_owning_project_without_marker_is_destination(tmp_path):
    d = tmp_path / "collected"
    assert same_path(owning_project(d), d)


def test_copy_failure_is_isolated(scan_root, dest, make_skill):
    for name in ("alpha", "bad", "zeta"):
        make_skill(scan_root, "proj", name, {"SKILL.md": name})

    def flaky_copier(src: Path, dest_parent: Path, name: str) -> Path:
        if name == "bad":
            raise OSError(28, "No space left on device")
        return copy_tree_staged(src, dest_parent, name)

    report = SkillSynchronizer(copier=flaky_copier).synchronize(scan_root, dest)

    assert (report.copied, report.failed) == (2, 1)
    assert not report.ok
    failed = [a for a in report.actions if a.kind is ActionKind.FAILED]
    assert failed[0].name == "bad"
    assert "No space left" in failed[0].error
    assert sorted(p.name for p in dest.iterdir()) == ["alpha", "zeta"]

    # a failed skill is not remembered as present, so the next run picks it up
    retry = synchronize(scan_root, dest)
    assert (retry.copied, retry.skipped) == (1, 2)
    assert (dest / "bad" / "SKILL.md").read_text(encoding="utf-8") == "bad"


def test_cancellation_is_checked_between_candidates(scan_root, dest, make_skill):
    for name in ("a", "b", "c"):
        make_skill(scan_root, "proj", name)
    calls: list[int] = []

    def should_stop() -> bool:
        calls.append(1)
        return len(calls) > 1

    report = synchronize(scan_root, dest, should_stop=should_stop)

    assert report.cancelled
    assert report.copied == 1
    assert [p.name for p in dest.iterdir()] == ["a"]


def test_missing_scan_root_gives_empty_report(tmp_path, dest):
    report = synchronize(tmp_path / "does-not-exist", dest)

    assert (report.sources, report.copied, report.skipped) == (0, 0, 0)
    assert dest.is_dir()


def test_destination_that_is_a_file_is_fatal(scan_root, tmp_path):
    target = tmp_path / "occupied"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(DestinationError) as err:
        synchronize(scan_root, target)

    assert err.value.operation == "create"
    assert err.value.path == target


def test_held_lock_aborts_without_touching_destination(scan_root, dest, make_skill):
    make_skill(scan_root, "proj", "foo")
    dest.mkdir()
    lock = dest / const.LOCK_FILE_NAME
    lock.write_text("12345\n", encoding="utf-8")

    with pytest.raises(LockHeldError):
        synchronize(scan_root, dest)

    assert not (dest / "foo").exists()
    assert lock.exists()


def test_lock_is_released_after_run(scan_root, dest, make_skill):
    make_skill(scan_root, "proj", "foo")

    synchronize(scan_root, dest)

    assert not (dest / const.LOCK_FILE_NAME).exists()


def test_hidden_entries_and_files_are_not_candidates(scan_root, dest, make_skill):
    skills = make_skill(scan_root, "proj", "real").parent
    (skills / ".cache").mkdir()
    (skills / "README.md").write_text("index", encoding="utf-8")

    report = synchronize(scan_root, dest)

    assert [a.name for a in report.actions] == ["real"]


def test_ignored_directories_are_not_scanned(scan_root, dest, make_skill):
    make_skill(scan_root / "node_modules", "pkg", "vendored")
    make_skill(scan_root, "proj", "mine")

    report = SkillSynchronizer(ignore_dirs=("node_modules",)).synchronize(scan_root, dest)

    assert report.sources == 1
    assert not (dest / "vendored").exists()


def test_events_follow_action_order(scan_root, dest, make_skill):
    make_skill(scan_root, "projA", "foo")
    make_skill(scan_root, "projB", "foo")
    bus = LocalEventBus()
    seen: list[str] = []
    bus.subscribe("", lambda ev: seen.append(ev.type))

    synchronize(scan_root, dest, bus=bus)

    assert seen == ["sync.started", "skill.copied", "skill.skipped", "sync.finished"]


def test_runs_do_not_share_state(scan_root, tmp_path, make_skill):
    make_skill(scan_root, "proj", "foo")
    sync = SkillSynchronizer()

    first = sync.synchronize(scan_root, tmp_path / "one")
    second = sync.synchronize(scan_root, tmp_path / "two")

    assert first.copied == 1
    assert second.copied == 1


def test_destination_inside_scan_root_is_never_rescanned(scan_root, make_skill):
    dest = scan_root / "collected"
    foo = make_skill(scan_root, "proj", "foo", {"SKILL.md": "foo"})
    # the skill ships a nested marker of its own, copied along with it
    (foo / ".claude" / "skills" / "x").mkdir(parents=True)
    assert same_path(owning_project(dest), dest)

    first = synchronize(scan_root, dest)
    assert (first.sources, first.copied) == (1, 1)
    assert (dest / "foo" / ".claude" / "skills" / "x").is_dir()
    state = sorted(str(p.relative_to(dest)) for p in dest.rglob("*"))

    second = synchronize(scan_root, dest)

    assert (second.sources, second.copied, second.skipped) == (1, 0, 1)
    assert [p.name for p in dest.iterdir()] == ["foo"]
    assert sorted(str(p.relative_to(dest)) for p in dest.rglob("*")) == state


def test_names_differing_only_in_case_collide_on_folding_filesystems(scan_root, dest, make_skill, monkeypatch):
    from skillsync.services.fs import safe_io

    monkeypatch.setattr(safe_io, "_CASE_INSENSITIVE", True)
    (dest / "Foo").mkdir(parents=True)
    (dest / "Foo" / "SKILL.md").write_text("original", encoding="utf-8")
    make_skill(scan_root, "proj", "foo", {"SKILL.md": "incoming"})

    report = synchronize(scan_root, dest)

    assert (report.copied, report.skipped, report.failed) == (0, 1, 0)
    assert [p.name for p in dest.iterdir()] == ["Foo"]
    assert (dest / "Foo" / "SKILL.md").read_text(encoding="utf-8") == "original"
