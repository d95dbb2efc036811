"""Cluster status reporting."""

from __future__ import annotations

from ..formatters import format_cluster_status
from .context import ClusterContext
from .errors import ClusterOperationError, GatewayError
from .gateway import TopologyView


class StatusReporter:
    """Read the active cluster's topology. Never mutates the cluster."""

    def __init__(self, context: ClusterContext):
        self.context = context

    def snapshot(self, root_password: str | None = None) -> TopologyView:
        """Fetch a status snapshot of the active cluster.

        Args:
            root_password: Used only when a remembered session has to be reopened.

        Raises:
            NoActiveClusterError: No cluster could be resolved.
        """
        handle = self.context.get_active(root_password)
        try:
            return handle.status()
        except GatewayError as e:
            raise ClusterOperationError.wrap("The cluster status could not be retrieved.", e) from e

    def status(self, root_password: str | None = None) -> str:
        """Render the active cluster's status as text."""
        return format_cluster_status(self.snapshot(root_password))
