"""
Tests for profile synchronization.
"""

import os
from pathlib import Path

import pytest

from shellstrap.core.services import profile_sync
from shellstrap.core.services.profile_sync import ProfileSourceMissing, sync_profile

PROFILE = "oh-my-posh init pwsh | Invoke-Expression\nImport-Module Terminal-Icons\n"


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
    path.parent.mkdir()
    path.write_text(PROFILE)
    return path


@pytest.fixture
def targets(tmp_path: Path, source: Path) -> list[Path]:
    return [
        source,
        tmp_path / "WindowsPowerShell" / "Microsoft.PowerShell_profile.ps1",
        tmp_path / "PowerShell" / "Microsoft.VSCode_profile.ps1",
    ]


class TestSyncProfile:
    def test_creates_missing_targets(self, source, targets):
        results = sync_profile(source, targets)
        assert [r.status for r in results] == ["written", "written"]
        for target in targets[1:]:
            assert target.read_text() == PROFILE

    def test_source_is_skipped(self, source, targets):
        results = sync_profile(source, targets)
        assert source not in [r.target for r in results]
        assert source.read_text() == PROFILE

    def test_updates_stale_target(self, source, targets):
        stale = targets[1]
        stale.parent.mkdir(parents=True)
        stale.write_text("# old profile\n")
        results = sync_profile(source, targets)
        assert results[0].status == "written"
        assert stale.read_text() == PROFILE

    def test_second_run_writes_nothing(self, source, targets):
        sync_profile(source, targets)
        mtimes = {t: t.stat().st_mtime_ns for t in targets[1:]}

        results = sync_profile(source, targets)
        assert [r.status for r in results] == ["unchanged", "unchanged"]
        assert {t: t.stat().st_mtime_ns for t in targets[1:]} == mtimes

    def test_unchanged_target_is_not_rewritten(self, source, targets, monkeypatch):
        sync_profile(source, targets)
        writes = []
        monkeypatch.setattr(profile_sync, "atomic_write_bytes", lambda p, c: writes.append(p))
        sync_profile(source, targets)
        assert writes == []

    def test_missing_source(self, tmp_path, targets):
        with pytest.raises(ProfileSourceMissing):
            sync_profile(tmp_path / "absent.ps1", targets)

    def test_one_failed_target_does_not_stop_others(self, source, targets, monkeypatch):
        real_write = profile_sync.atomic_write_bytes

        def flaky(path, content):
            if "WindowsPowerShell" in str(path):
                raise PermissionError("access denied")
            real_write(path, content)

        monkeypatch.setattr(profile_sync, "atomic_write_bytes", flaky)
        results = sync_profile(source, targets)
        assert [r.status for r in results] == ["failed", "written"]
        assert "access denied" in results[0].error
        assert targets[2].read_text() == PROFILE

    def test_bom_is_carried_to_siblings(self, tmp_path, targets):
        src = tmp_path / "bom.ps1"
        src.write_bytes(b"\xef\xbb\xbfWrite-Host 'h\xc3\xa9llo'\r\n")
        sync_profile(src, targets)
        for target in targets:
            assert target.read_bytes() == src.read_bytes()

    def test_sibling_missing_bom_is_rewritten(self, tmp_path, targets):
        src = tmp_path / "bom.ps1"
        src.write_bytes(b"\xef\xbb\xbf" + PROFILE.encode())
        plain = targets[1]
        plain.parent.mkdir(parents=True)
        plain.write_bytes(PROFILE.encode())
        results = sync_profile(src, targets)
        assert results[1].status == "written"
        assert plain.read_bytes() == src.read_bytes()

    def test_to_dict(self, source, targets):
        d = sync_profile(source, targets)[0].to_dict()
        assert d["status"] == "written"
        assert "error" not in d
        assert os.path.basename(d["target"]) == "Microsoft.PowerShell_profile.ps1"
