"""Active cluster reference.

A ``ClusterContext`` owns the single "current cluster" handle shared by the
workflow steps of one invocation, together with the gateway used to reach it.
It is passed explicitly to every workflow and to the status reporter.
"""

from __future__ import annotations

from ..shared.logging import get_logger
from .errors import ClusterOperationError, GatewayError, NoActiveClusterError, SessionError
from .gateway import AdminGateway, ClusterHandle
from .state import SessionStore, StoredSession

logger = get_logger(__name__)


class ClusterContext:
    """Hold the active cluster handle and resolve it on demand."""

    def __init__(self, gateway: AdminGateway, store: SessionStore | None = None):
        """Initialize cluster context.

        Args:
            gateway: Administration gateway used for every call.
            store: Optional store remembering the session across invocations.
        """
        self.gateway = gateway
        self.store = store
        self._active: ClusterHandle | None = None

    @property
    def has_active(self) -> bool:
        return self._active is not None

    def set_active(self, handle: ClusterHandle) -> None:
        """Make ``handle`` the active cluster."""
        self._active = handle
        name = getattr(handle, "name", None)
        logger.info("cluster.active", cluster=name)

        uri = self.gateway.session_uri
        if self.store and uri:
            self.store.save(StoredSession(uri=uri, cluster_name=name))

    def clear_active(self) -> None:
        """Forget the active cluster and any remembered session."""
        self._active = None
        if self.store:
            self.store.clear()
        logger.info("cluster.cleared")

    def get_active(self, password: str | None = None) -> ClusterHandle:
        """Return the active cluster, resolving it if none is held yet.

        Resolution order: the held handle; the cluster of the open gateway
        session; the remembered session, reconnected with ``password``.

        Args:
            password: Password for reconnecting a remembered session.

        Returns:
            The active cluster handle.

        Raises:
            NoActiveClusterError: Nothing could be resolved.
            SessionError: The remembered session could not be reopened.
            ClusterOperationError: The session has no retrievable cluster.
        """
        if self._active is not None:
            return self._active

        if not self.gateway.is_open():
            stored = self.store.load() if self.store else None
            if stored is None or not password:
                raise NoActiveClusterError()
            logger.info("cluster.reconnect", uri=stored.uri)
            try:
                self.gateway.connect(stored.uri, password)
            except GatewayError as e:
                raise SessionError.wrap(
                    f"Failed to establish a session to '{stored.uri}'.", e
                ) from e

        try:
            handle = self.gateway.get_cluster()
        except GatewayError as e:
            raise ClusterOperationError.wrap("The InnoDB cluster could not be retrieved.", e) from e

        self.set_active(handle)
        return handle
