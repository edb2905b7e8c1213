from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from assetprune.analyzer import detect
from assetprune.models import AssetConfig, ReferenceScan
from assetprune.remover import remove_unused


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class _StaticScanner:
    def __init__(self, referenced: set[str]) -> None:
        self.referenced = referenced

    def scan_references(self) -> ReferenceScan:
        return ReferenceScan(referenced_assets=frozenset(self.referenced))


def _project(tmp_path: Path) -> AssetConfig:
    _write(tmp_path / "assets" / "used.png", "used")
    _write(tmp_path / "assets" / "unused.png", "unused!")
    _write(tmp_path / "assets" / "fonts" / "old.ttf", "old font")
    _write(tmp_path / "assets" / "locked.png", "locked")
    return AssetConfig(root=tmp_path)


def test_dry_run_leaves_filesystem_untouched(tmp_path: Path) -> None:
    config = _project(tmp_path)
    scanner = _StaticScanner({"assets/used.png"})
    before = detect(config, scanner)

    outcome = remove_unused(tmp_path, before)

    assert outcome.dry_run is True
    assert outcome.removed_count == 3
    assert outcome.removed_size == before.summary.total_unused_size
    assert outcome.errors == ()
    assert (tmp_path / "assets" / "unused.png").exists()
    after = detect(config, scanner)
    assert replace(after, generated_at="") == replace(before, generated_at="")


def test_execute_removes_unused_assets(tmp_path: Path) -> None:
    config = _project(tmp_path)
    report = detect(config, _StaticScanner({"assets/used.png"}))

    outcome = remove_unused(tmp_path, report, dry_run=False)

    assert outcome.dry_run is False
    assert outcome.removed_count == 3
    assert outcome.removed_size == 7 + 8 + 6
    assert outcome.formatted_removed_size == "21 B"
    assert (tmp_path / "assets" / "used.png").exists()
    assert not (tmp_path / "assets" / "unused.png").exists()
    assert not (tmp_path / "assets" / "fonts" / "old.ttf").exists()
    assert detect(config, _StaticScanner({"assets/used.png"})).unused_assets == ()


def test_execute_isolates_delete_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config = _project(tmp_path)
    report = detect(config, _StaticScanner({"assets/used.png"}))
    real_unlink = Path.unlink

    def fake_unlink(self: Path, missing_ok: bool = False) -> None:
        if self.name == "locked.png":
            raise PermissionError(13, "Permission denied", str(self))
        real_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", fake_unlink)

    outcome = remove_unused(tmp_path, report, dry_run=False)

    assert outcome.removed_count == 2
    assert outcome.removed_size == 7 + 8
    assert set(outcome.removed) == {"assets/unused.png", "assets/fonts/old.ttf"}
    assert outcome.errors == ("Error removing assets/locked.png: Permission denied",)
    assert (tmp_path / "assets" / "locked.png").exists()
    assert not (tmp_path / "assets" / "unused.png").exists()


def test_file_vanished_before_removal_is_recorded(tmp_path: Path) -> None:
    config = _project(tmp_path)
    report = detect(config, _StaticScanner({"assets/used.png"}))
    (tmp_path / "assets" / "unused.png").unlink()

    outcome = remove_unused(tmp_path, report, dry_run=False)

    assert outcome.removed_count == 2
    assert len(outcome.errors) == 1
    assert outcome.errors[0].startswith("Error removing assets/unused.png")


def test_empty_unused_list_is_noop(tmp_path: Path) -> None:
    _write(tmp_path / "assets" / "used.png", "used")
    report = detect(AssetConfig(root=tmp_path), _StaticScanner({"assets/used.png"}))

    outcome = remove_unused(tmp_path, report, dry_run=False)

    assert outcome.removed_count == 0
    assert outcome.removed_size == 0
    assert outcome.formatted_removed_size == "0 B"
    assert outcome.errors == ()
    assert (tmp_path / "assets" / "used.png").exists()
