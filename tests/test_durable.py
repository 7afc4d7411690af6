from __future__ import annotations

import os
from pathlib import Path

import pytest

from module_maker import durable
from module_maker.durable import WriteOutcome, durable_write


def _no_sleep(_: float) -> None:
    return None


def test_durable_write_creates_parent_and_file(tmp_path: Path):
    target = tmp_path / "nested" / "dir" / "file.php"
    assert durable_write(target, "<?php\n", sleep=_no_sleep) is WriteOutcome.REPLACED
    assert target.read_text(encoding="utf-8") == "<?php\n"
    assert sorted(p.name for p in target.parent.iterdir()) == ["file.php"]


def test_durable_write_replaces_existing(tmp_path: Path):
    target = tmp_path / "file.txt"
    target.write_text("old", encoding="utf-8")
    assert durable_write(target, "new", sleep=_no_sleep) is WriteOutcome.REPLACED
    assert target.read_text(encoding="utf-8") == "new"


def test_durable_write_retries_rename_then_succeeds(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    target = tmp_path / "file.txt"
    real_replace = os.replace
    calls = {"count": 0}
    delays: list[float] = []

    def flaky_replace(src, dst):
        calls["count"] += 1
        if calls["count"] < 3:
            raise PermissionError("locked")
        real_replace(src, dst)

    monkeypatch.setattr(durable.os, "replace", flaky_replace)
    assert durable_write(target, "data", delay=0.5, sleep=delays.append) is WriteOutcome.REPLACED
    assert target.read_text(encoding="utf-8") == "data"
    assert delays == [0.5, 0.5]


def test_durable_write_falls_back_to_copy_and_cleans_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    target = tmp_path / "file.txt"

    def locked_replace(src, dst):
        raise PermissionError("locked")

    monkeypatch.setattr(durable.os, "replace", locked_replace)
    delays: list[float] = []
    assert durable_write(target, "copied", retries=3, sleep=delays.append) is WriteOutcome.COPIED
    assert target.read_text(encoding="utf-8") == "copied"
    assert len(delays) == 3
    assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


def test_durable_write_total_failure_is_not_raised(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    target = tmp_path / "file.txt"

    def locked_replace(src, dst):
        raise PermissionError("locked")

    def broken_copy(src, dst):
        raise PermissionError("still locked")

    monkeypatch.setattr(durable.os, "replace", locked_replace)
    monkeypatch.setattr(durable.shutil, "copyfile", broken_copy)
    assert durable_write(target, "lost", retries=2, sleep=_no_sleep) is WriteOutcome.FAILED
    assert list(tmp_path.iterdir()) == []
