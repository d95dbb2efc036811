"""Error taxonomy for cluster administration.

Validation and cluster-level failures abort the enclosing workflow. Per-instance
lifecycle failures inside batch loops are recorded and skipped.
"""

from dataclasses import dataclass


@dataclass
class GatewayError(Exception):
    """A call into the administration gateway failed."""

    message: str
    operation: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ClusterAdminError(Exception):
    """Base error class for workflow errors."""

    message: str
    cause: str | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def wrap(cls, context: str, error: Exception) -> "ClusterAdminError":
        """Build an error whose message carries the underlying cause.

        Args:
            context: What was being attempted
            error: The underlying failure

        Returns:
            Instance of the called class
        """
        cause = str(error)
        return cls(message=f"{context} Message: {cause}", cause=cause)


@dataclass
class ValidationError(ClusterAdminError):
    """Bad or missing argument. Raised before any gateway call."""


@dataclass
class SessionError(ClusterAdminError):
    """An administrative session could not be opened."""


@dataclass
class ClusterOperationError(ClusterAdminError):
    """A create/get/reboot/add/configure call failed."""


@dataclass
class ProvisioningError(ClusterOperationError):
    """The sandbox cluster could not be deployed."""


@dataclass
class RebootError(ClusterOperationError):
    """The sandbox cluster could not be rebooted after an outage."""


@dataclass
class InstanceOperationError(ClusterAdminError):
    """Stopping, starting or deleting a single sandbox instance failed."""

    port: int | None = None


@dataclass
class NoActiveClusterError(ClusterAdminError):
    """No cluster could be resolved for a status or topology query."""

    message: str = (
        "No cluster defined yet. Connect to an instance that is part of a "
        "cluster, or deploy a sandbox cluster or create a production cluster first."
    )
