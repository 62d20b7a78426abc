"""
Tests for configuration loading, path expansion and config check.
"""

import textwrap
from pathlib import Path

import pytest

from shellstrap.core.config import loader
from shellstrap.core.config.loader import ConfigError, find_config_file, load_config
from shellstrap.core.config.paths import expand, has_unresolved
from shellstrap.core.use_cases.config_check import check_config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        package_manager:
          name: winget
        skip:
          - zoxide
        tools:
          - name: ripgrep
            probe:
              commands: [rg]
            install:
              packages:
                winget: BurntSushi.ripgrep.MSVC
        editor:
          font_face: "JetBrainsMono Nerd Font"
          assignments:
            - key: editor.fontLigatures
              value: true
              nested: false
    """)
    path = tmp_path / "shellstrap.yml"
    path.write_text(content)
    return path


@pytest.fixture(autouse=True)
def _no_user_config(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(loader, "USER_CONFIG_DIR", tmp_path / "no-user-config")


class TestLoadConfig:
    def test_load(self, config_file: Path):
        config = load_config(config_file)
        assert config.package_manager.name == "winget"
        assert config.skip == ["zoxide"]
        assert config.tools[0].name == "ripgrep"
        assert config.tools[0].probe.commands == ("rg",)
        assert config.editor.font_face == "JetBrainsMono Nerd Font"
        assert config.editor.assignments[0].nested is False

    def test_defaults_fill_the_rest(self, config_file: Path):
        config = load_config(config_file)
        assert config.terminal.path.endswith("LocalState/settings.json")
        assert config.migration.tool == "pwsh"
        assert config.network.ip_endpoints[0] == "https://api.ipify.org"

    def test_partial_settings_section(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text(
            "package_manager:\n  name: winget\n"
            "terminal:\n  enabled: false\n"
            "editor:\n  font_face: JetBrainsMono Nerd Font\n"
        )
        config = load_config(path)
        assert config.package_manager.name == "winget"
        assert config.terminal.enabled is False
        assert "WindowsTerminal" in config.terminal.path
        assert config.editor.path == "%APPDATA%/Code/User/settings.json"
        assert config.editor.font_face == "JetBrainsMono Nerd Font"

    def test_no_file_means_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.package_manager.name == "scoop"
        assert config.tools == []

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("")
        assert load_config(path).package_manager.name == "scoop"

    def test_wrapped_under_key(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("shellstrap:\n  skip: [git]\n")
        assert load_config(path).skip == ["git"]

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("skip: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_schema_violation(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("package_manager:\n  name: chocolatey\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_search_upward(self, config_file: Path):
        nested = config_file.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config_file.resolve()

    def test_user_fallback(self, tmp_path: Path, monkeypatch):
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "shellstrap.yml").write_text("skip: []\n")
        monkeypatch.setattr(loader, "USER_CONFIG_DIR", user_dir)
        start = tmp_path / "elsewhere"
        start.mkdir()
        assert find_config_file(start) == user_dir / "shellstrap.yml"

    def test_not_found(self, tmp_path: Path):
        start = tmp_path / "empty"
        start.mkdir()
        assert find_config_file(start) is None


# ── Path Expansion Tests ─────────────────────────────────────────────


class TestExpand:
    def test_percent_vars(self, monkeypatch):
        monkeypatch.setenv("APPDATA", "/users/me/roaming")
        assert expand("%APPDATA%/Code/User/settings.json") == Path(
            "/users/me/roaming/Code/User/settings.json"
        )

    def test_dollar_vars_and_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        monkeypatch.setenv("TOOLS", "tools")
        assert expand("~/$TOOLS/bin") == tmp_path / "tools" / "bin"

    def test_unknown_var_left_in_place(self, monkeypatch):
        monkeypatch.delenv("SHELLSTRAP_NOPE", raising=False)
        assert "%SHELLSTRAP_NOPE%" in str(expand("%SHELLSTRAP_NOPE%/x"))
        assert has_unresolved("%SHELLSTRAP_NOPE%/x")

    def test_resolved(self, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", "/local")
        assert not has_unresolved("%LOCALAPPDATA%/x")


# ── Config Check Tests ───────────────────────────────────────────────


class TestCheckConfig:
    def test_valid(self, config_file: Path, fake_home):
        result = check_config(config_file)
        assert result.valid
        d = result.to_dict()
        assert d["package_manager"] == "winget"
        assert "zoxide" not in d["tools"]
        assert d["tools"][-1] == "ripgrep"

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "shellstrap.yml"
        path.write_text("- nope\n")
        result = check_config(path)
        assert not result.valid
        assert result.errors

    def test_warns_on_unknown_skip(self, tmp_path: Path, fake_home):
        path = tmp_path / "shellstrap.yml"
        path.write_text("skip: [not-a-tool]\n")
        assert any("not-a-tool" in w for w in check_config(path).warnings)

    def test_warns_on_tool_without_method(self, tmp_path: Path, fake_home):
        path = tmp_path / "shellstrap.yml"
        path.write_text("tools:\n  - name: orphan\n")
        assert any("orphan" in w for w in check_config(path).warnings)

    def test_node_has_command_method_for_winget(self, tmp_path: Path, fake_home):
        path = tmp_path / "shellstrap.yml"
        path.write_text("package_manager:\n  name: winget\n")
        assert check_config(path).warnings == []

    def test_no_file_warns_defaults(self, tmp_path: Path, monkeypatch, fake_home):
        monkeypatch.chdir(tmp_path)
        result = check_config()
        assert result.valid
        assert any("defaults" in w for w in result.warnings)

    def test_warns_on_unresolved_path(self, tmp_path: Path, fake_home, monkeypatch):
        monkeypatch.delenv("LOCALAPPDATA")
        path = tmp_path / "shellstrap.yml"
        path.write_text("skip: []\n")
        assert any("terminal.path" in w for w in check_config(path).warnings)
