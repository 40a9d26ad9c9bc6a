"""Tests for gateway settings."""

import json
import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from winbasic.settings import GatewaySettings
from winbasic.shell import DEFAULT_BLOCKED_PATTERNS


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestGatewaySettings:
    """Tests for GatewaySettings."""

    def test_defaults(self):
        """Test default values."""
        settings = GatewaySettings()
        assert settings.server_name == "mcp-windows-basic"
        assert settings.roots == []
        assert settings.initial_roots() == []
        assert settings.filesystem.max_search_results == 100
        assert settings.shell.default_timeout_ms == 30_000
        assert settings.shell.powershell_executable == "powershell"
        assert [p.tag for p in settings.shell.blocked_patterns] == [
            p.tag for p in DEFAULT_BLOCKED_PATTERNS
        ]
        assert settings.log_level == "INFO"

    def test_log_level_normalized(self):
        """Test that level names are upper-cased."""
        assert GatewaySettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Test that unknown levels are rejected."""
        with pytest.raises(ValidationError):
            GatewaySettings(log_level="chatty")

    def test_unknown_field(self):
        """Test that typos in config are caught."""
        with pytest.raises(ValidationError):
            GatewaySettings(rootz=["C:/projects"])

    def test_initial_roots(self, temp_dir):
        """Test converting configured roots."""
        settings = GatewaySettings(roots=["file:///C:/work", str(temp_dir)])
        roots = settings.initial_roots()

        assert roots[0].uri == "file:///C:/work"
        assert roots[1].uri == temp_dir.resolve().as_uri()

    def test_from_yaml_file(self, temp_dir):
        """Test loading from YAML."""
        config_file = temp_dir / "gateway.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "roots": ["C:/projects/app"],
                    "filesystem": {"max_matches_per_file": 3},
                    "shell": {"default_timeout_ms": 5000, "powershell_executable": "pwsh"},
                }
            )
        )

        settings = GatewaySettings.from_file(config_file)

        assert settings.roots == ["C:/projects/app"]
        assert settings.filesystem.max_matches_per_file == 3
        assert settings.shell.default_timeout_ms == 5000
        assert settings.shell.powershell_executable == "pwsh"

    def test_from_json_file(self, temp_dir):
        """Test loading from JSON."""
        config_file = temp_dir / "gateway.json"
        config_file.write_text(
            json.dumps(
                {
                    "server_name": "custom",
                    "shell": {
                        "blocked_patterns": [{"tag": "shutdown", "pattern": r"shutdown\s"}]
                    },
                }
            )
        )

        settings = GatewaySettings.from_file(config_file)

        assert settings.server_name == "custom"
        assert [p.tag for p in settings.shell.blocked_patterns] == ["shutdown"]

    def test_from_empty_file(self, temp_dir):
        """Test that an empty file yields defaults."""
        config_file = temp_dir / "empty.yaml"
        config_file.write_text("")

        assert GatewaySettings.from_file(config_file).roots == []

    def test_from_missing_file(self, temp_dir):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            GatewaySettings.from_file(temp_dir / "missing.yaml")

    def test_invalid_blocked_pattern(self):
        """Test that uncompilable patterns are rejected."""
        with pytest.raises(ValidationError):
            GatewaySettings(shell={"blocked_patterns": [{"tag": "x", "pattern": "("}]})

    def test_env_overrides(self, monkeypatch):
        """Test reading WINBASIC_* environment variables."""
        monkeypatch.setenv("WINBASIC_SERVER_NAME", "from-env")
        monkeypatch.setenv("WINBASIC_ROOTS", '["C:/env-root"]')
        monkeypatch.setenv("WINBASIC_SHELL__DEFAULT_TIMEOUT_MS", "1234")

        settings = GatewaySettings()

        assert settings.server_name == "from-env"
        assert settings.roots == ["C:/env-root"]
        assert settings.shell.default_timeout_ms == 1234

    def test_arguments_beat_env(self, monkeypatch):
        """Test that explicit values take priority over the environment."""
        monkeypatch.setenv("WINBASIC_SERVER_NAME", "from-env")

        assert GatewaySettings(server_name="explicit").server_name == "explicit"
