"""Unit tests for icadmin.config module."""

from unittest.mock import patch

import pytest
import yaml

from icadmin.config import CLIConfig, load_config, save_config, unset_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / ".icadmin" / "config.yaml"
    with patch("icadmin.config.get_config_path", return_value=path):
        yield path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ICADMIN_SHELL",
        "ICADMIN_SHELL_TIMEOUT",
        "ICADMIN_POLL_ATTEMPTS",
        "ICADMIN_POLL_INTERVAL",
        "ICADMIN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.cli_unit
class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self, config_file):
        config = load_config()

        assert config.shell_path == "mysqlsh"
        assert config.poll_attempts == 10
        assert config.poll_interval == 1.0
        assert config.get_source("shell_path") == "default"

    def test_config_file(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("shell_path: /usr/local/bin/mysqlsh\npoll_attempts: 20\n")

        config = load_config()

        assert config.shell_path == "/usr/local/bin/mysqlsh"
        assert config.poll_attempts == 20
        assert config.get_source("poll_attempts") == "config file"
        assert config.get_source("poll_interval") == "default"

    def test_environment_overrides_file(self, config_file, monkeypatch):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("poll_attempts: 20\n")
        monkeypatch.setenv("ICADMIN_POLL_ATTEMPTS", "5")

        config = load_config()

        assert config.poll_attempts == 5
        assert config.get_source("poll_attempts") == "environment"

    def test_bad_environment_value_ignored(self, config_file, monkeypatch):
        monkeypatch.setenv("ICADMIN_POLL_INTERVAL", "soon")

        config = load_config()

        assert config.poll_interval == 1.0

    def test_bad_file_value_ignored(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("shell_timeout: forever\n")

        assert load_config().shell_timeout == 300

    @pytest.mark.parametrize(
        ("variable", "raw"),
        [
            ("ICADMIN_POLL_INTERVAL", "-1"),
            ("ICADMIN_POLL_ATTEMPTS", "0"),
            ("ICADMIN_SHELL_TIMEOUT", "-5"),
        ],
    )
    def test_out_of_range_environment_value_ignored(
        self, config_file, monkeypatch, variable, raw
    ):
        monkeypatch.setenv(variable, raw)

        config = load_config()

        assert config.values() == CLIConfig().values()

    def test_out_of_range_file_value_ignored(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("poll_interval: -1\npoll_attempts: 0\n")

        config = load_config()

        assert config.poll_interval == 1.0
        assert config.poll_attempts == 10
        assert config.get_source("poll_interval") == "default"

    def test_unreadable_file(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("- just\n- a list\n")

        assert load_config().values() == CLIConfig().values()


@pytest.mark.cli_unit
class TestSaveConfig:
    """Tests for save_config and unset_config."""

    def test_save_creates_file(self, config_file):
        save_config("poll_attempts", "15")

        assert yaml.safe_load(config_file.read_text()) == {"poll_attempts": 15}

    def test_save_keeps_other_keys(self, config_file):
        save_config("shell_path", "/opt/mysqlsh")
        save_config("poll_interval", "0.5")

        assert yaml.safe_load(config_file.read_text()) == {
            "shell_path": "/opt/mysqlsh",
            "poll_interval": 0.5,
        }

    def test_save_unknown_key(self, config_file):
        with pytest.raises(KeyError):
            save_config("server", "http://localhost")

    def test_save_bad_value(self, config_file):
        with pytest.raises(ValueError):
            save_config("poll_attempts", "many")
        assert not config_file.exists()

    @pytest.mark.parametrize(("key", "value"), [("poll_interval", "-1"), ("poll_attempts", "0")])
    def test_save_out_of_range_value(self, config_file, key, value):
        with pytest.raises(ValueError, match="must be at least"):
            save_config(key, value)
        assert not config_file.exists()

    def test_save_zero_interval(self, config_file):
        save_config("poll_interval", "0")

        assert yaml.safe_load(config_file.read_text()) == {"poll_interval": 0.0}

    def test_unset(self, config_file):
        save_config("poll_attempts", "15")

        assert unset_config("poll_attempts") is True
        assert unset_config("poll_attempts") is False
        assert load_config().poll_attempts == 10

    def test_values_exclude_sources(self):
        assert "_sources" not in CLIConfig().values()
