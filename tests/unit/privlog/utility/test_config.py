"""
Tests for YAML configuration loading.
"""
import pytest

from privlog.core.journal import JournalConfig
from privlog.utility.config import expand_env_vars, load_config
from privlog.utility.exceptions import ConfigError


class TestExpandEnvVars:
    """Test environment variable expansion."""

    def test_expands_set_variable(self, monkeypatch):
        """Test ${VAR} is replaced by its value."""
        monkeypatch.setenv("PRIVLOG_TEST_DIR", "/data/private")
        assert expand_env_vars("${PRIVLOG_TEST_DIR}/logs") == "/data/private/logs"

    def test_uses_default_when_unset(self, monkeypatch):
        """Test ${VAR:-default} falls back to the default."""
        monkeypatch.delenv("PRIVLOG_TEST_DIR", raising=False)
        assert expand_env_vars("${PRIVLOG_TEST_DIR:-/tmp/logs}") == "/tmp/logs"

    def test_empty_default_allowed(self, monkeypatch):
        """Test an empty default expands to nothing."""
        monkeypatch.delenv("PRIVLOG_TEST_DIR", raising=False)
        assert expand_env_vars("a${PRIVLOG_TEST_DIR:-}b") == "ab"

    def test_unset_without_default_raises(self, monkeypatch):
        """Test a missing variable without default is a config error."""
        monkeypatch.delenv("PRIVLOG_TEST_DIR", raising=False)
        with pytest.raises(ConfigError, match="PRIVLOG_TEST_DIR"):
            expand_env_vars("${PRIVLOG_TEST_DIR}")

    def test_walks_nested_structures(self, monkeypatch):
        """Test dicts and lists are expanded recursively, other values untouched."""
        monkeypatch.setenv("PRIVLOG_TEST_DIR", "x")
        data = {"a": ["${PRIVLOG_TEST_DIR}", 3], "b": {"c": "${PRIVLOG_TEST_DIR}"}}
        assert expand_env_vars(data) == {"a": ["x", 3], "b": {"c": "x"}}


class TestLoadConfig:
    """Test loading JournalConfig from YAML files."""

    def test_journal_section(self, temp_dir):
        """Test settings under a journal key are loaded."""
        config_file = temp_dir / "node.yml"
        config_file.write_text(
            "journal:\n"
            f"  logs_dir: {temp_dir}\n"
            "  max_entries: 50\n"
            "  retention_seconds: 3600\n"
        )

        config = load_config(config_file)

        assert config == JournalConfig(
            logs_dir=str(temp_dir), max_entries=50, retention_seconds=3600
        )

    def test_top_level_settings(self, temp_dir):
        """Test a bare mapping is treated as the journal section."""
        config_file = temp_dir / "journal.yml"
        config_file.write_text("max_entries: 5\nserializer: memory\n")

        config = load_config(str(config_file))

        assert config.max_entries == 5
        assert config.serializer == "memory"
        assert config.retention_seconds == JournalConfig().retention_seconds

    def test_empty_file_gives_defaults(self, temp_dir):
        """Test an empty file means default settings."""
        config_file = temp_dir / "empty.yml"
        config_file.write_text("")
        assert load_config(config_file) == JournalConfig()

    def test_env_vars_expanded(self, temp_dir, monkeypatch):
        """Test environment references in values are expanded."""
        monkeypatch.setenv("PRIVLOG_TEST_DIR", str(temp_dir))
        config_file = temp_dir / "node.yml"
        config_file.write_text("journal:\n  logs_dir: ${PRIVLOG_TEST_DIR}\n")

        assert load_config(config_file).logs_dir == str(temp_dir)

    def test_missing_file(self, temp_dir):
        """Test a missing file is a config error."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "nope.yml")

    def test_invalid_yaml(self, temp_dir):
        """Test broken YAML is a config error."""
        config_file = temp_dir / "bad.yml"
        config_file.write_text("journal: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_file)

    def test_non_mapping(self, temp_dir):
        """Test a YAML list is rejected."""
        config_file = temp_dir / "list.yml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_invalid_values(self, temp_dir):
        """Test validation errors are wrapped in ConfigError."""
        config_file = temp_dir / "node.yml"
        config_file.write_text("journal:\n  max_entries: 0\n")
        with pytest.raises(ConfigError, match="Invalid journal configuration"):
            load_config(config_file)

    def test_unknown_serializer(self, temp_dir):
        """Test an unregistered serializer type is rejected."""
        config_file = temp_dir / "node.yml"
        config_file.write_text("journal:\n  serializer: redis\n")
        with pytest.raises(ConfigError):
            load_config(config_file)
