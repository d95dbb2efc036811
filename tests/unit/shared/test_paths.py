"""Unit tests for icadmin.shared.paths module."""

from pathlib import Path

import pytest


@pytest.mark.cli_unit
class TestPaths:
    """Tests for path constants."""

    def test_icadmin_dir_is_in_home(self):
        """Test ICADMIN_DIR is in user's home directory."""
        from icadmin.shared.paths import ICADMIN_DIR

        assert ICADMIN_DIR == Path.home() / ".icadmin"

    def test_config_file_location(self):
        from icadmin.shared.paths import CONFIG_FILE, ICADMIN_DIR

        assert CONFIG_FILE == ICADMIN_DIR / "config.yaml"

    def test_session_file_location(self):
        """Test SESSION_FILE is in ICADMIN_DIR."""
        from icadmin.shared.paths import ICADMIN_DIR, SESSION_FILE

        assert SESSION_FILE == ICADMIN_DIR / "session.yaml"

    def test_session_store_default_path(self):
        from icadmin.cluster import SessionStore
        from icadmin.shared.paths import SESSION_FILE

        assert SessionStore().path == SESSION_FILE
