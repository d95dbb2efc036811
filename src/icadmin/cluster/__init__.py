"""InnoDB cluster provisioning package.

This package provides the workflows behind the icadmin commands:
1. Validates arguments before anything is touched
2. Issues ordered calls to the administration gateway (MySQL Shell)
3. Waits for members to report ONLINE after membership changes
4. Tracks the active cluster for later commands
5. Renders cluster status
"""

from .context import ClusterContext
from .errors import (
    ClusterAdminError,
    ClusterOperationError,
    GatewayError,
    InstanceOperationError,
    NoActiveClusterError,
    ProvisioningError,
    RebootError,
    SessionError,
    ValidationError,
)
from .gateway import (
    AddInstanceOptions,
    AdminGateway,
    ClusterDescription,
    ClusterHandle,
    ConfigureOptions,
    InstanceEndpoint,
    MemberStatus,
    RebootOptions,
    SandboxOptions,
    TopologyView,
)
from .poller import ConvergencePoller, ConvergenceResult, all_online, primary_online
from .shell import MySQLShellGateway, ShellCluster
from .state import SessionStore, StoredSession
from .status import StatusReporter
from .workflows import ClusterWorkflows, WorkflowResult, sandbox_port, sandbox_ports

__all__ = [
    # Errors
    "ClusterAdminError",
    "ValidationError",
    "SessionError",
    "ClusterOperationError",
    "ProvisioningError",
    "RebootError",
    "InstanceOperationError",
    "NoActiveClusterError",
    "GatewayError",
    # Gateway types
    "AdminGateway",
    "ClusterHandle",
    "InstanceEndpoint",
    "SandboxOptions",
    "RebootOptions",
    "ConfigureOptions",
    "AddInstanceOptions",
    "MemberStatus",
    "TopologyView",
    "ClusterDescription",
    # MySQL Shell
    "MySQLShellGateway",
    "ShellCluster",
    # Convergence polling
    "ConvergencePoller",
    "ConvergenceResult",
    "primary_online",
    "all_online",
    # Active cluster
    "ClusterContext",
    "SessionStore",
    "StoredSession",
    # Workflows
    "ClusterWorkflows",
    "WorkflowResult",
    "sandbox_port",
    "sandbox_ports",
    # Status
    "StatusReporter",
]
