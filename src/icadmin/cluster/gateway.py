"""Administration gateway interface.

The gateway wraps the cluster administration engine (MySQL Shell's AdminAPI).
Workflows only depend on the calls and shapes defined here; every failure is
reported as ``GatewayError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

ONLINE = "ONLINE"


@dataclass(frozen=True)
class InstanceEndpoint:
    """Address and credentials of a server instance."""

    host: str
    port: int
    user: str = "root"
    password: str | None = field(default=None, repr=False)

    @property
    def uri(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"


@dataclass(frozen=True)
class SandboxOptions:
    password: str = field(repr=False)


@dataclass(frozen=True)
class RebootOptions:
    password: str = field(repr=False)
    rejoin_instances: list[str] = field(default_factory=list)
    remove_instances: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ConfigureOptions:
    """Options for persisting an instance's cluster configuration."""

    password: str = field(repr=False)
    mycnf_path: str | None = None
    cluster_admin: str | None = None
    cluster_admin_password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class AddInstanceOptions:
    password: str = field(repr=False)


@dataclass(frozen=True)
class MemberStatus:
    """One member entry of a topology snapshot."""

    key: str
    address: str
    mode: str = ""
    role: str = ""
    status: str = ""

    @property
    def online(self) -> bool:
        return self.status == ONLINE


@dataclass(frozen=True)
class TopologyView:
    """Read-only snapshot of a cluster status call."""

    cluster_name: str
    status: str = ""
    status_text: str = ""
    primary: str = ""
    members: tuple[MemberStatus, ...] = ()

    @classmethod
    def from_status(cls, data: dict[str, Any]) -> TopologyView:
        """Build a view from an AdminAPI ``status()`` document.

        Args:
            data: Status document with ``clusterName`` and ``defaultReplicaSet``

        Returns:
            TopologyView snapshot
        """
        replica_set = data.get("defaultReplicaSet", {})
        topology = replica_set.get("topology", {})
        members = tuple(
            MemberStatus(
                key=key,
                address=entry.get("address", key),
                mode=entry.get("mode", ""),
                role=entry.get("memberRole", entry.get("role", "")),
                status=entry.get("status", ""),
            )
            for key, entry in topology.items()
        )
        return cls(
            cluster_name=data.get("clusterName", replica_set.get("name", "")),
            status=replica_set.get("status", ""),
            status_text=replica_set.get("statusText", ""),
            primary=replica_set.get("primary", ""),
            members=members,
        )

    def member(self, key: str) -> MemberStatus | None:
        """Look up a member by topology key or address."""
        for member in self.members:
            if key in (member.key, member.address):
                return member
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster_name": self.cluster_name,
            "status": self.status,
            "status_text": self.status_text,
            "primary": self.primary,
            "members": [
                {
                    "address": m.address,
                    "mode": m.mode,
                    "role": m.role,
                    "status": m.status,
                }
                for m in self.members
            ],
        }


@dataclass(frozen=True)
class ClusterDescription:
    """Read-only snapshot of a cluster ``describe()`` call."""

    cluster_name: str
    addresses: tuple[str, ...] = ()

    @classmethod
    def from_describe(cls, data: dict[str, Any]) -> ClusterDescription:
        replica_set = data.get("defaultReplicaSet", {})
        addresses = tuple(
            instance.get("host") or instance.get("address", "")
            for instance in replica_set.get("instances", [])
        )
        return cls(
            cluster_name=data.get("clusterName", replica_set.get("name", "")),
            addresses=addresses,
        )

    @property
    def ports(self) -> list[int]:
        """Ports of all member instances, parsed from ``host:port``."""
        return [int(address.rsplit(":", 1)[1]) for address in self.addresses if ":" in address]


class ClusterHandle(Protocol):
    """Reference to a provisioned cluster."""

    name: str

    def status(self) -> TopologyView: ...

    def describe(self) -> ClusterDescription: ...

    def add_instance(self, uri: str, options: AddInstanceOptions) -> None: ...


class AdminGateway(Protocol):
    """Calls the workflows issue against the administration engine."""

    @property
    def session_uri(self) -> str | None: ...

    def connect(self, uri: str, password: str) -> None: ...

    def is_open(self) -> bool: ...

    def deploy_sandbox_instance(self, port: int, options: SandboxOptions) -> None: ...

    def stop_sandbox_instance(self, port: int, options: SandboxOptions) -> None: ...

    def delete_sandbox_instance(self, port: int) -> None: ...

    def start_sandbox_instance(self, port: int) -> None: ...

    def create_cluster(self, name: str) -> ClusterHandle: ...

    def get_cluster(self) -> ClusterHandle: ...

    def reboot_cluster_from_complete_outage(
        self, name: str, options: RebootOptions
    ) -> ClusterHandle: ...

    def configure_local_instance(self, target: str, options: ConfigureOptions) -> None: ...
