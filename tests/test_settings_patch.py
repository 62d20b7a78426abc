"""
Tests for the settings patcher and the terminal/editor assignments.
"""

import json
from pathlib import Path

import pytest

from shellstrap.core.models.config import (
    DEFAULT_FONT_FACE,
    PWSH_TERMINAL_GUID,
    SettingAssignment,
    SettingsTargetConfig,
)
from shellstrap.core.services import settings_patch
from shellstrap.core.services.settings_patch import (
    load_document,
    merge_preserving,
    patch_settings,
    strip_jsonc,
)
from shellstrap.core.services.settings_targets import (
    editor_assignments,
    terminal_assignments,
    terminal_profile_guid,
)

FONT = [SettingAssignment(key="profiles.defaults.font.face", value="MesloLGM Nerd Font")]


def _write(path: Path, doc) -> Path:
    path.write_text(json.dumps(doc, indent=2))
    return path


# ── JSONC Tests ──────────────────────────────────────────────────────


class TestStripJsonc:
    def test_line_and_block_comments(self):
        text = '{\n  // line\n  "a": 1, /* block */ "b": 2\n}'
        assert json.loads(strip_jsonc(text)) == {"a": 1, "b": 2}

    def test_trailing_commas(self):
        assert json.loads(strip_jsonc('{"a": [1, 2,], "b": 3,\n}')) == {"a": [1, 2], "b": 3}

    def test_strings_untouched(self):
        text = '{"url": "https://example.com/x", "glob": "a/*b*/c", "q": "say \\"hi\\" // no"}'
        assert json.loads(strip_jsonc(text)) == json.loads(text)


class TestLoadDocument:
    def test_missing(self, tmp_path):
        assert load_document(tmp_path / "settings.json") == ({}, "missing")

    def test_empty(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("  \n")
        assert load_document(path) == ({}, "ok")

    def test_jsonc(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{\n  // Windows Terminal\n  "theme": "dark",\n}\n')
        assert load_document(path) == ({"theme": "dark"}, "ok")

    def test_malformed(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{ not json")
        assert load_document(path) == ({}, "malformed")

    def test_non_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        assert load_document(path) == ({}, "malformed")


# ── Merge Tests ──────────────────────────────────────────────────────


class TestMergePreserving:
    def test_creates_intermediates(self):
        result = merge_preserving({}, FONT)
        assert result.document == {"profiles": {"defaults": {"font": {"face": "MesloLGM Nerd Font"}}}}
        assert result.changed == ["profiles.defaults.font.face"]

    def test_keeps_siblings(self):
        doc = {"profiles": {"defaults": {"opacity": 80, "font": {"size": 11}}, "list": [1]}}
        result = merge_preserving(doc, FONT)
        assert result.document["profiles"]["defaults"] == {
            "opacity": 80, "font": {"size": 11, "face": "MesloLGM Nerd Font"},
        }
        assert result.document["profiles"]["list"] == [1]

    def test_user_value_wins(self):
        doc = {"profiles": {"defaults": {"font": {"face": "Cascadia Code"}}}}
        result = merge_preserving(doc, FONT)
        assert result.changed == []
        assert result.document == doc

    def test_overwrite(self):
        assignment = SettingAssignment(key="defaultProfile", value="{pwsh}", overwrite=True)
        result = merge_preserving({"defaultProfile": "{cmd}"}, [assignment])
        assert result.document["defaultProfile"] == "{pwsh}"
        assert result.changed == ["defaultProfile"]

    def test_overwrite_same_value_is_no_change(self):
        assignment = SettingAssignment(key="defaultProfile", value="{pwsh}", overwrite=True)
        assert merge_preserving({"defaultProfile": "{pwsh}"}, [assignment]).changed == []

    def test_flat_keys(self):
        assignment = SettingAssignment(
            key="terminal.integrated.fontFamily", value="Meslo", nested=False,
        )
        result = merge_preserving({"editor.fontSize": 14}, [assignment])
        assert result.document == {"editor.fontSize": 14, "terminal.integrated.fontFamily": "Meslo"}

    def test_conflict_with_scalar_intermediate(self):
        result = merge_preserving({"profiles": "oops"}, FONT)
        assert result.conflicts == ["profiles.defaults.font.face"]
        assert result.document == {"profiles": "oops"}

    def test_input_not_mutated(self):
        doc = {"a": {}}
        merge_preserving(doc, [SettingAssignment(key="a.b", value=1)])
        assert doc == {"a": {}}


# ── Patch Tests ──────────────────────────────────────────────────────


class TestPatchSettings:
    def test_preserves_unrelated_keys(self, tmp_path):
        original = {
            "theme": "dark",
            "keybindings": [{"command": "copy", "keys": "ctrl+c"}],
            "profiles": {"defaults": {"opacity": 90}, "list": [{"name": "cmd", "guid": "{c}"}]},
        }
        path = _write(tmp_path / "settings.json", original)
        result = patch_settings(path, FONT)

        assert result.status == "changed"
        doc = json.loads(path.read_text())
        assert doc["theme"] == "dark"
        assert doc["keybindings"] == original["keybindings"]
        assert doc["profiles"]["list"] == original["profiles"]["list"]
        assert doc["profiles"]["defaults"] == {"opacity": 90, "font": {"face": "MesloLGM Nerd Font"}}

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "settings.json"
        result = patch_settings(path, FONT)
        assert result.status == "changed"
        assert result.load_status == "missing"
        assert result.backup is None
        assert json.loads(path.read_text())["profiles"]["defaults"]["font"]["face"]

    def test_no_change_no_write(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "settings.json",
                      {"profiles": {"defaults": {"font": {"face": "Cascadia"}}}})
        before = path.read_bytes()
        writes = []
        monkeypatch.setattr(settings_patch, "atomic_write_text", lambda p, t: writes.append(p))

        result = patch_settings(path, FONT)
        assert result.status == "unchanged"
        assert writes == []
        assert path.read_bytes() == before
        assert not (tmp_path / "settings.json.bak").exists()

    def test_second_run_is_unchanged(self, tmp_path):
        path = _write(tmp_path / "settings.json", {"theme": "dark"})
        assert patch_settings(path, FONT).status == "changed"
        assert patch_settings(path, FONT).status == "unchanged"

    def test_backup_written_before_change(self, tmp_path):
        path = _write(tmp_path / "settings.json", {"theme": "dark"})
        original = path.read_bytes()
        result = patch_settings(path, FONT)
        assert result.backup == tmp_path / "settings.json.bak"
        assert result.backup.read_bytes() == original

    def test_serialize_failure_restores_original(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "settings.json", {"theme": "dark"})
        original = path.read_bytes()
        monkeypatch.setattr(settings_patch, "_serialize", lambda doc: '{"truncated": ')

        result = patch_settings(path, FONT)
        assert result.status == "failed"
        assert path.read_bytes() == original

    def test_write_failure_restores_original(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "settings.json", {"theme": "dark"})
        original = path.read_bytes()

        def torn_write(target, text):
            target.write_text(text[: len(text) // 2])
            raise OSError("power loss")

        monkeypatch.setattr(settings_patch, "atomic_write_text", torn_write)
        result = patch_settings(path, FONT)
        assert result.status == "failed"
        assert "power loss" in result.error
        assert path.read_bytes() == original

    def test_write_failure_on_new_file_leaves_nothing(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"

        def torn_write(target, text):
            target.write_text("{")
            raise OSError("power loss")

        monkeypatch.setattr(settings_patch, "atomic_write_text", torn_write)
        assert patch_settings(path, FONT).status == "failed"
        assert not path.exists()

    def test_malformed_file_is_backed_up_and_replaced(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{ broken")
        result = patch_settings(path, FONT)
        assert result.status == "changed"
        assert result.load_status == "malformed"
        assert result.backup.read_text() == "{ broken"
        assert json.loads(path.read_text())["profiles"]

    def test_jsonc_file_is_patched(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{\n  // keep me\n  "theme": "dark",\n}\n')
        result = patch_settings(path, FONT)
        assert result.status == "changed"
        assert json.loads(path.read_text())["theme"] == "dark"

    def test_assignment_builder_error(self, tmp_path):
        def broken(doc):
            raise KeyError("profiles")

        result = patch_settings(tmp_path / "settings.json", broken)
        assert result.status == "failed"
        assert not (tmp_path / "settings.json").exists()

    def test_conflict_reported(self, tmp_path):
        path = _write(tmp_path / "settings.json", {"profiles": []})
        result = patch_settings(path, FONT)
        assert result.status == "unchanged"
        assert result.conflicts == ["profiles.defaults.font.face"]


# ── Terminal / Editor Assignment Tests ───────────────────────────────


class TestTerminalAssignments:
    @pytest.fixture
    def cfg(self):
        return SettingsTargetConfig(path="settings.json")

    def test_guid_from_profile_list(self):
        doc = {"profiles": {"list": [
            {"name": "Command Prompt", "guid": "{cmd}"},
            {"name": "PowerShell", "source": "Windows.Terminal.PowershellCore", "guid": "{ps7}"},
        ]}}
        assert terminal_profile_guid(doc) == "{ps7}"

    def test_guid_fallback(self):
        assert terminal_profile_guid({}) == PWSH_TERMINAL_GUID
        assert terminal_profile_guid({"profiles": "odd"}) == PWSH_TERMINAL_GUID

    def test_guid_from_legacy_list(self):
        assert terminal_profile_guid({"profiles": [{"name": "PowerShell", "guid": "{x}"}]}) == "{x}"

    def test_patch_terminal(self, tmp_path, cfg):
        path = _write(tmp_path / "settings.json", {
            "defaultProfile": "{cmd}",
            "profiles": {"list": [{"name": "PowerShell", "guid": "{ps7}"}]},
        })
        result = patch_settings(path, terminal_assignments(cfg))
        doc = json.loads(path.read_text())
        assert result.status == "changed"
        assert doc["defaultProfile"] == "{ps7}"
        assert doc["profiles"]["defaults"]["font"]["face"] == DEFAULT_FONT_FACE
        assert doc["profiles"]["list"] == [{"name": "PowerShell", "guid": "{ps7}"}]

    def test_extra_assignments(self, cfg):
        cfg.assignments.append(SettingAssignment(key="copyOnSelect", value=True))
        keys = [a.key for a in terminal_assignments(cfg)({})]
        assert keys[-1] == "copyOnSelect"


class TestEditorAssignments:
    def test_patch_editor(self, tmp_path):
        path = _write(tmp_path / "settings.json", {
            "editor.fontSize": 14,
            "terminal.integrated.fontFamily": "Fira Code",
        })
        cfg = SettingsTargetConfig(path=str(path))
        result = patch_settings(path, editor_assignments(cfg))
        doc = json.loads(path.read_text())
        assert result.changed == ["terminal.integrated.defaultProfile.windows"]
        assert doc["terminal.integrated.defaultProfile.windows"] == "PowerShell"
        assert doc["terminal.integrated.fontFamily"] == "Fira Code"
        assert doc["editor.fontSize"] == 14
        assert "terminal" not in doc
