"""Shared modules for icadmin.

Paths below ~/.icadmin/ and logging setup used by the CLI and the cluster
workflows.
"""

from .logging import configure_logging, get_logger, level_for_verbosity
from .paths import CONFIG_FILE, ICADMIN_DIR, SESSION_FILE

__all__ = [
    # Paths
    "ICADMIN_DIR",
    "CONFIG_FILE",
    "SESSION_FILE",
    # Logging
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
]
