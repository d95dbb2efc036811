"""Provisioning workflows for InnoDB clusters.

Each workflow is a linear sequence of gateway calls. Cluster-level failures
abort the workflow and surface the gateway's message; failures of a single
sandbox instance inside a batch loop are recorded and the loop goes on.
Nothing already applied is rolled back.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..shared.logging import get_logger
from .context import ClusterContext
from .errors import (
    ClusterOperationError,
    GatewayError,
    InstanceOperationError,
    ProvisioningError,
    RebootError,
    SessionError,
)
from .gateway import (
    AddInstanceOptions,
    ClusterHandle,
    ConfigureOptions,
    InstanceEndpoint,
    RebootOptions,
    SandboxOptions,
    TopologyView,
)
from .poller import ConvergencePoller, all_online, primary_online
from .validation import (
    require_host,
    require_in_range,
    require_non_empty_string,
    require_password,
    require_port,
    require_string,
)

logger = get_logger(__name__)

SANDBOX_CLUSTER_NAME = "sandboxCluster"
SANDBOX_HOST = "localhost"
SANDBOX_USER = "root"
SANDBOX_BASE_PORT = 3310
SANDBOX_PORT_STEP = 10
MAX_SANDBOX_INSTANCES = 9

# Pause after shutting down sandboxes so the last shutdown completes
STOP_SETTLE_SECONDS = 1.0


def sandbox_port(index: int) -> int:
    """Port of the sandbox instance at ``index`` (0-based)."""
    return SANDBOX_BASE_PORT + SANDBOX_PORT_STEP * index


def sandbox_ports(count: int = MAX_SANDBOX_INSTANCES) -> list[int]:
    """Ports of the first ``count`` sandbox instances, in provisioning order."""
    return [sandbox_port(i) for i in range(count)]


def sandbox_endpoint(port: int, password: str | None = None) -> InstanceEndpoint:
    return InstanceEndpoint(host=SANDBOX_HOST, port=port, user=SANDBOX_USER, password=password)


@dataclass
class WorkflowResult:
    """Outcome of a workflow that ran to completion."""

    handle: ClusterHandle | None = None
    converged: bool = True
    instance_errors: list[InstanceOperationError] = field(default_factory=list)
    message: str = ""


class ClusterWorkflows:
    """Multi-step cluster provisioning procedures."""

    def __init__(
        self,
        context: ClusterContext,
        poller: ConvergencePoller | None = None,
        notify: Callable[[str], None] | None = None,
    ):
        """Initialize workflows.

        Args:
            context: Cluster context holding the gateway and active cluster.
            poller: Convergence poller (default: 10 attempts, 1 second apart).
            notify: Optional callback receiving progress lines for the operator.
        """
        self.context = context
        self.poller = poller or ConvergencePoller()
        self.notify = notify

    @property
    def gateway(self):
        return self.context.gateway

    def _notify(self, message: str) -> None:
        if self.notify:
            self.notify(message)

    def _on_poll_attempt(self, attempt: int, max_attempts: int, view: TopologyView) -> None:
        online = sum(1 for member in view.members if member.online)
        self._notify(
            f"  Attempt {attempt}/{max_attempts}: {online}/{len(view.members)} instances ONLINE"
        )

    def _instance_failure(
        self, port: int, context: str, error: GatewayError
    ) -> InstanceOperationError:
        failure = InstanceOperationError.wrap(context, error)
        failure.port = port
        logger.warning("sandbox.instance.failed", port=port, error=failure.cause)
        self._notify(f"INFO: {failure.message}")
        return failure

    # ── Sandbox clusters ──

    def deploy_sandbox_cluster(self, instance_count: int, root_password: str) -> WorkflowResult:
        """Deploy sandbox instances and form a ready-to-use cluster on them.

        Instances listen on 3310, 3320, ... The first one seeds the cluster,
        the others join it. Once every member is ONLINE, each instance gets
        its group replication settings persisted.

        Args:
            instance_count: Number of sandbox instances (1-9).
            root_password: Password set for the root account of every instance.

        Returns:
            WorkflowResult with the new cluster handle.

        Raises:
            ValidationError: Bad arguments, before any gateway call.
            ProvisioningError: Deployment, seeding or reconfiguration failed.
        """
        require_in_range(instance_count, 1, MAX_SANDBOX_INSTANCES, "instanceCount")
        require_password(root_password, "rootPassword")

        ports = sandbox_ports(instance_count)
        log = logger.bind(workflow="deploy_sandbox_cluster", instances=instance_count)
        self._notify(
            f"Setting up a MySQL InnoDB cluster with {instance_count} MySQL Server "
            f"sandbox instance{'s' if instance_count > 1 else ''} on "
            f"port{'s' if instance_count > 1 else ''} {', '.join(str(p) for p in ports)}."
        )

        sandbox_options = SandboxOptions(password=root_password)
        join_errors: list[InstanceOperationError] = []

        try:
            self._notify("Deploying the requested number of sandbox instances...")
            for port in ports:
                log.info("sandbox.deploy", port=port)
                self.gateway.deploy_sandbox_instance(port, sandbox_options)
            self._notify("Sandbox instances deployed successfully.")

            self._notify("Setting up InnoDB cluster...")
            seed = sandbox_endpoint(ports[0], root_password)
            self.gateway.connect(seed.uri, root_password)
            handle = self.gateway.create_cluster(SANDBOX_CLUSTER_NAME)
            log.info("cluster.created", seed=seed.uri)

            self._notify("Waiting till seed instance reaches ONLINE status.")
            seeded = self.poller.wait(handle.status, primary_online, self._on_poll_attempt)
            if seeded.converged:
                self._notify("Seed instance reached ONLINE status.")
            else:
                log.warning("cluster.seed.not_online")
                self._notify("Seed instance has not reached ONLINE status yet.")

            if len(ports) > 1:
                self._notify("Adding instances to the cluster...")
            for port in ports[1:]:
                endpoint = sandbox_endpoint(port, root_password)
                log.info("cluster.add_instance", instance=endpoint.uri)
                try:
                    handle.add_instance(endpoint.uri, AddInstanceOptions(password=root_password))
                except GatewayError as e:
                    join_errors.append(
                        self._instance_failure(
                            port,
                            f"The instance '{endpoint.uri}' could not be added to the cluster.",
                            e,
                        )
                    )

            self._notify("Waiting till all instances reach ONLINE status.")
            members = self.poller.wait(handle.status, all_online, self._on_poll_attempt)

            if members.converged:
                self._notify("All instances reached ONLINE status.")
                self._notify("Reconfiguring instances of the cluster...")
                for port in ports:
                    endpoint = sandbox_endpoint(port, root_password)
                    log.info("instance.configure", instance=endpoint.uri)
                    self.gateway.configure_local_instance(
                        endpoint.uri, ConfigureOptions(password=root_password)
                    )
                self._notify("Instances successfully re-configured.")
            else:
                log.warning("cluster.members.not_online")
                self._notify(
                    "Some instances have not reached ONLINE status yet. Please allow "
                    "more time for them to catch up to the seed instance."
                )
        except GatewayError as e:
            log.error("sandbox.deploy.failed", error=str(e))
            raise ProvisioningError.wrap("Failed to create the InnoDB cluster.", e) from e

        self.context.set_active(handle)
        return WorkflowResult(
            handle=handle,
            converged=members.converged,
            instance_errors=join_errors,
            message="InnoDB cluster deployed successfully.",
        )

    def delete_sandbox_instances(self, root_password: str) -> WorkflowResult:
        """Stop and delete every possible sandbox instance.

        All nine sandbox ports are visited whether or not an instance was
        deployed there, so the call can be repeated safely.

        Args:
            root_password: Root password of the sandbox instances.

        Returns:
            WorkflowResult listing the stop/delete attempts that failed.
        """
        require_password(root_password, "rootPassword")

        self._notify(
            "Stopping and removing all possible sandbox instances to leave a clean system behind..."
        )
        self.context.clear_active()

        options = SandboxOptions(password=root_password)
        errors: list[InstanceOperationError] = []
        for port in sandbox_ports():
            self._notify(f"Removing sandbox instance {port}...")
            try:
                self.gateway.stop_sandbox_instance(port, options)
            except GatewayError as e:
                errors.append(
                    self._instance_failure(
                        port,
                        "Error stopping sandbox instance. Already stopped or not existing.",
                        e,
                    )
                )
            try:
                self.gateway.delete_sandbox_instance(port)
            except GatewayError as e:
                errors.append(self._instance_failure(port, "Could not remove the instance.", e))

        logger.info("sandbox.deleted", failures=len(errors))
        return WorkflowResult(
            instance_errors=errors, message="Sandbox instances have been deleted."
        )

    def stop_sandbox_instances(self, root_password: str) -> WorkflowResult:
        """Shut down every possible sandbox instance, last provisioned first."""
        require_password(root_password, "rootPassword")

        self._notify("Shutting down all sandbox instances...")
        options = SandboxOptions(password=root_password)
        errors: list[InstanceOperationError] = []
        for port in reversed(sandbox_ports()):
            self._notify(f"Shutting down sandbox instance {port}...")
            try:
                self.gateway.stop_sandbox_instance(port, options)
            except GatewayError as e:
                errors.append(
                    self._instance_failure(
                        port,
                        "Error stopping sandbox instance. Already stopped or not existing.",
                        e,
                    )
                )

        time.sleep(STOP_SETTLE_SECONDS)
        logger.info("sandbox.stopped", failures=len(errors))
        return WorkflowResult(
            instance_errors=errors, message="Sandbox instances have been shut down."
        )

    def start_sandbox_cluster(self, root_password: str) -> WorkflowResult:
        """Start the sandbox cluster after it has been shut down.

        The seed instance is started and the cluster rebooted from it; the
        remaining members are then started one by one.

        Args:
            root_password: Root password of the sandbox instances.

        Returns:
            WorkflowResult with the rebooted cluster handle.

        Raises:
            RebootError: The seed could not be started or the cluster rebooted.
            ClusterOperationError: The member list could not be read.
        """
        require_password(root_password, "rootPassword")

        self._notify("Starting the sandbox cluster...")
        seed = sandbox_endpoint(SANDBOX_BASE_PORT, root_password)
        try:
            self.gateway.start_sandbox_instance(seed.port)
            self.gateway.connect(seed.uri, root_password)
            handle = self.gateway.reboot_cluster_from_complete_outage(
                SANDBOX_CLUSTER_NAME, RebootOptions(password=root_password)
            )
        except GatewayError as e:
            logger.error("cluster.reboot.failed", error=str(e))
            raise RebootError.wrap("Cannot reboot the cluster.", e) from e

        self.context.set_active(handle)

        try:
            ports = handle.describe().ports
        except GatewayError as e:
            raise ClusterOperationError.wrap(
                "Failed to get the sandbox cluster instances.", e
            ) from e

        errors: list[InstanceOperationError] = []
        for port in ports:
            if port == seed.port:
                continue
            logger.info("sandbox.start", port=port)
            try:
                self.gateway.start_sandbox_instance(port)
            except GatewayError as e:
                errors.append(
                    self._instance_failure(
                        port,
                        "Cannot start sandbox instance. The instance might already be "
                        "running or non existing.",
                        e,
                    )
                )

        self._notify("Waiting till all instances reach ONLINE status.")
        try:
            members = self.poller.wait(handle.status, all_online, self._on_poll_attempt)
        except GatewayError as e:
            raise ClusterOperationError.wrap("The cluster status could not be retrieved.", e) from e
        if not members.converged:
            logger.warning("cluster.members.not_online")
            self._notify("Some instances have not reached ONLINE status yet.")

        return WorkflowResult(
            handle=handle,
            converged=members.converged,
            instance_errors=errors,
            message="InnoDB cluster successfully restarted.",
        )

    def restart_sandbox_cluster(self, root_password: str) -> WorkflowResult:
        """Stop all sandbox instances, then start the sandbox cluster again."""
        stopped = self.stop_sandbox_instances(root_password)
        started = self.start_sandbox_cluster(root_password)
        started.instance_errors = stopped.instance_errors + started.instance_errors
        return started

    # ── Production clusters ──

    def prepare_local_instance(
        self,
        admin: str,
        admin_password: str,
        port: int,
        root_password: str,
        cnf_path: str | None = None,
    ) -> WorkflowResult:
        """Update a local instance's configuration for InnoDB cluster usage.

        Args:
            admin: Name of the cluster administrator account to create.
            admin_password: Password of the cluster administrator.
            port: Port the local instance listens on.
            root_password: Root password of the local instance.
            cnf_path: Option file to update; empty or None for the default.

        Returns:
            WorkflowResult (no cluster handle).

        Raises:
            ClusterOperationError: The instance could not be configured.
        """
        require_non_empty_string(admin, "clusterAdmin")
        require_password(admin_password, "clusterAdminPassword")
        require_port(port, "localInstancePort")
        require_password(root_password, "rootPassword")
        if cnf_path is not None:
            require_string(cnf_path, "cnfPath")

        target = InstanceEndpoint(host=SANDBOX_HOST, port=port, user=SANDBOX_USER)
        options = ConfigureOptions(
            password=root_password,
            mycnf_path=cnf_path or None,
            cluster_admin=admin,
            cluster_admin_password=admin_password,
        )
        self._notify("Preparing an instance for InnoDB cluster usage...")
        logger.info("instance.configure", instance=target.uri, mycnf_path=options.mycnf_path)
        try:
            self.gateway.configure_local_instance(target.uri, options)
        except GatewayError as e:
            raise ClusterOperationError.wrap(
                "The local instance could not be configured.", e
            ) from e

        return WorkflowResult(
            message=(
                "The instance configuration has been prepared for InnoDB cluster usage. "
                "The instance now needs to be restarted to adopt the updated configuration."
            )
        )

    def create_production_cluster(
        self,
        name: str,
        admin: str,
        admin_password: str,
        hostname: str,
        port: int,
    ) -> WorkflowResult:
        """Create a cluster seeded by a real (non-sandbox) instance."""
        require_non_empty_string(name, "clusterName")
        require_non_empty_string(admin, "clusterAdmin")
        require_password(admin_password, "clusterAdminPassword")
        require_host(hostname, "seedInstanceHostname")
        require_port(port, "seedInstancePort")

        seed = InstanceEndpoint(host=hostname, port=port, user=admin)
        self._notify(f"Setting up a MySQL InnoDB cluster on '{hostname}:{port}'...")
        try:
            self.gateway.connect(seed.uri, admin_password)
        except GatewayError as e:
            raise SessionError.wrap(f"Failed to establish a session to '{seed.uri}'.", e) from e

        try:
            handle = self.gateway.create_cluster(name)
        except GatewayError as e:
            raise ClusterOperationError.wrap("The InnoDB cluster could not be created.", e) from e

        logger.info("cluster.created", cluster=name, seed=seed.uri)
        self.context.set_active(handle)
        return WorkflowResult(handle=handle, message="InnoDB cluster deployed successfully.")

    def add_local_instance_to_cluster(
        self,
        admin: str,
        admin_password: str,
        cluster_host: str,
        cluster_port: int,
        local_root_password: str,
        local_host: str,
        local_port: int,
    ) -> WorkflowResult:
        """Add a local instance to an existing cluster.

        Args:
            admin: Cluster administrator account.
            admin_password: Password of the cluster administrator.
            cluster_host: Host of any instance already in the cluster.
            cluster_port: Port of that instance.
            local_root_password: Root password of the local instance.
            local_host: External address of the local instance.
            local_port: Port of the local instance.

        Returns:
            WorkflowResult with the cluster the instance joined.

        Raises:
            SessionError: The cluster instance could not be reached.
            ClusterOperationError: The cluster could not be retrieved or the
                instance could not be added. The active cluster is unchanged.
        """
        require_non_empty_string(admin, "clusterAdmin")
        require_password(admin_password, "clusterAdminPassword")
        require_host(cluster_host, "clusterInstanceHostname")
        require_port(cluster_port, "clusterInstancePort")
        require_password(local_root_password, "localRootPassword")
        require_host(local_host, "localInstanceHostname")
        require_port(local_port, "localInstancePort")

        cluster_endpoint = InstanceEndpoint(host=cluster_host, port=cluster_port, user=admin)
        local_endpoint = InstanceEndpoint(host=local_host, port=local_port, user=admin)
        self._notify(
            f"Adding the instance '{local_host}:{local_port}' to the InnoDB cluster "
            f"running on '{cluster_host}:{cluster_port}'..."
        )

        try:
            self.gateway.connect(cluster_endpoint.uri, admin_password)
        except GatewayError as e:
            raise SessionError.wrap(
                f"Failed to establish a session to the cluster instance '{cluster_endpoint.uri}'.",
                e,
            ) from e

        try:
            handle = self.gateway.get_cluster()
        except GatewayError as e:
            raise ClusterOperationError.wrap("The InnoDB cluster could not be retrieved.", e) from e

        try:
            handle.add_instance(local_endpoint.uri, AddInstanceOptions(password=admin_password))
        except GatewayError as e:
            raise ClusterOperationError.wrap(
                f"The instance '{local_endpoint.uri}' could not be added to the cluster.", e
            ) from e

        logger.info("cluster.instance_added", instance=local_endpoint.uri)
        self.context.set_active(handle)
        return WorkflowResult(
            handle=handle, message="Instance successfully added to the InnoDB cluster."
        )
