"""Remembered cluster session.

Each CLI invocation is a fresh process, so the session that produced the
active cluster is recorded in ~/.icadmin/session.yaml. Only the connection
URI and the cluster name are stored, never a password.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from ..shared.logging import get_logger
from ..shared.paths import SESSION_FILE

logger = get_logger(__name__)


@dataclass
class StoredSession:
    """Connection that last produced an active cluster."""

    uri: str
    cluster_name: str | None = None


class SessionStore:
    """Persist the last active cluster session."""

    def __init__(self, path: Path | None = None):
        """Initialize session store.

        Args:
            path: Session file (default: ~/.icadmin/session.yaml)
        """
        self.path = path or SESSION_FILE

    def load(self) -> StoredSession | None:
        """Load the stored session.

        Returns:
            StoredSession, or None when nothing usable is stored.
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("session.unreadable", path=str(self.path), error=str(e))
            return None

        if not isinstance(data, dict) or not data.get("uri"):
            return None
        return StoredSession(uri=str(data["uri"]), cluster_name=data.get("cluster"))

    def save(self, session: StoredSession) -> None:
        """Write the session file, creating its directory if needed.

        A file that cannot be written is logged and skipped; the cluster
        stays active for the current process.
        """
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                yaml.dump(
                    {"uri": session.uri, "cluster": session.cluster_name},
                    f,
                    default_flow_style=False,
                )
        except OSError as e:
            logger.warning("session.unwritable", path=str(self.path), error=str(e))
            return
        logger.debug("session.saved", uri=session.uri, cluster=session.cluster_name)

    def clear(self) -> bool:
        """Remove the session file.

        Returns:
            True if a file was removed, False if none existed
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.debug("session.cleared", path=str(self.path))
        return True
