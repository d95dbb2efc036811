"""Path management for icadmin.

Manages the ~/.icadmin/ directory holding CLI configuration and the remembered
cluster session.
"""

from pathlib import Path

# Base directory for all icadmin data
ICADMIN_DIR = Path.home() / ".icadmin"

# CLI configuration file
CONFIG_FILE = ICADMIN_DIR / "config.yaml"

# Last active cluster session (URI and cluster name, never passwords)
SESSION_FILE = ICADMIN_DIR / "session.yaml"
