"""Tests for config loading, validation, and env var overrides."""

import tomllib
from pathlib import Path

import pytest

from diffsense.config.defaults import DEFAULT_TOML
from diffsense.config.loader import ConfigError, find_config_file, load_config
from diffsense.errors import DiffSenseError


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.diff.staged is False
        assert cfg.diff.context_lines == 0
        assert cfg.scope.map == {}
        assert cfg.history.limit == 5
        assert cfg.redaction.enabled is True
        assert cfg.redaction.patterns_dir == ".diffsense-patterns"
        assert cfg.output.format == "terminal"

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".diffsense.toml").write_text(
            'version = "1.0"\n'
            "[diff]\n"
            "staged = true\n"
            "context_lines = 3\n"
            "[scope]\n"
            'map = { "client/" = "frontend" }\n'
            "[redaction]\n"
            'disable = ["bearer-token"]\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.diff.staged is True
        assert cfg.diff.context_lines == 3
        assert cfg.scope.map == {"client/": "frontend"}
        assert cfg.redaction.disable == ["bearer-token"]

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".diffsense.toml").write_text("[history]\nlimit = 9\nflavour = 'x'\n")
        assert load_config(tmp_path).history.limit == 9

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".diffsense.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_config_error_is_typed(self):
        assert issubclass(ConfigError, DiffSenseError)

    def test_find_config_file(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None
        (tmp_path / ".diffsense.toml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / ".diffsense.toml"

    def test_default_template_parses(self, tmp_path: Path):
        assert tomllib.loads(DEFAULT_TOML)["output"]["format"] == "terminal"
        (tmp_path / ".diffsense.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.history.limit == 5


class TestValidation:
    @pytest.mark.parametrize(
        "body",
        [
            '[output]\nformat = "xml"\n',
            "[diff]\ncontext_lines = -1\n",
            "[history]\nlimit = 0\n",
            '[scope]\nmap = { "client/" = 3 }\n',
            'diff = "not a table"\n',
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body):
        (tmp_path / ".diffsense.toml").write_text(body)
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvOverrides:
    def test_format(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("DIFFSENSE_FORMAT", "json")
        assert load_config(tmp_path).output.format == "json"

    def test_invalid_format_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("DIFFSENSE_FORMAT", "xml")
        assert load_config(tmp_path).output.format == "terminal"

    def test_context_lines(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("DIFFSENSE_CONTEXT_LINES", "5")
        assert load_config(tmp_path).diff.context_lines == 5

    def test_bad_context_lines_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("DIFFSENSE_CONTEXT_LINES", "lots")
        assert load_config(tmp_path).diff.context_lines == 0

    def test_disable_patterns_extend_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".diffsense.toml").write_text('[redaction]\ndisable = ["jwt"]\n')
        monkeypatch.setenv("DIFFSENSE_DISABLE_PATTERNS", "aws-key, ,slack-token")
        assert load_config(tmp_path).redaction.disable == ["jwt", "aws-key", "slack-token"]
