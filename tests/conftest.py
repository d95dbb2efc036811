"""Shared test fixtures for icadmin tests.

This module provides an in-memory administration gateway:
- FakeGateway: records every call and fails on request, per operation or port
- FakeCluster: cluster handle whose members turn ONLINE after a set number of polls
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import patch

import pytest

from icadmin.cluster import (
    ClusterContext,
    ClusterDescription,
    ClusterWorkflows,
    ConvergencePoller,
    GatewayError,
    MemberStatus,
    TopologyView,
)

DEFAULT_MEMBERS = ["localhost:3310", "localhost:3320", "localhost:3330"]


def address_of(uri: str) -> str:
    """Strip the user part of ``user@host:port``."""
    return uri.split("@", 1)[-1]


@dataclass
class FakeCluster:
    """Cluster handle backed by FakeGateway state."""

    name: str
    gateway: FakeGateway

    def status(self) -> TopologyView:
        self.gateway.record("status", self.name)
        self.gateway.check("status")
        self.gateway.status_calls += 1
        online = self.gateway.status_calls > self.gateway.offline_polls
        members = tuple(
            MemberStatus(
                key=address,
                address=address,
                mode="R/W" if i == 0 else "R/O",
                role="PRIMARY" if i == 0 else "SECONDARY",
                status="ONLINE" if online else "RECOVERING",
            )
            for i, address in enumerate(self.gateway.members)
        )
        return TopologyView(
            cluster_name=self.name,
            status="OK" if online else "OK_NO_TOLERANCE",
            status_text="Cluster is ONLINE and can tolerate up to ONE failure.",
            primary=self.gateway.members[0] if self.gateway.members else "",
            members=members,
        )

    def describe(self) -> ClusterDescription:
        self.gateway.record("describe", self.name)
        self.gateway.check("describe")
        return ClusterDescription(cluster_name=self.name, addresses=tuple(self.gateway.members))

    def add_instance(self, uri: str, options: Any) -> None:
        self.gateway.record("add_instance", uri)
        port = int(uri.rsplit(":", 1)[1])
        self.gateway.check("add_instance", port)
        self.gateway.members.append(address_of(uri))


@dataclass
class FakeGateway:
    """In-memory administration gateway.

    Set ``fail[operation]`` to fail every call of an operation, or
    ``fail_ports[operation]`` to fail it only for some ports. The first
    ``offline_polls`` status calls report members that are not ONLINE yet.
    """

    members: list[str] = field(default_factory=list)
    offline_polls: int = 0
    fail: dict[str, str] = field(default_factory=dict)
    fail_ports: dict[str, set[int]] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)
    status_calls: int = 0
    session_uri: str | None = None
    cluster_name: str = "devCluster"

    def record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))

    def check(self, operation: str, port: int | None = None) -> None:
        if operation in self.fail:
            raise GatewayError(self.fail[operation], operation)
        if port is not None and port in self.fail_ports.get(operation, set()):
            raise GatewayError(f"{operation} failed on port {port}", operation)

    def ops(self, operation: str) -> list[tuple]:
        """Calls of one operation, in order."""
        return [call for call in self.calls if call[0] == operation]

    def names(self) -> list[str]:
        """Operation names of all calls, in order."""
        return [call[0] for call in self.calls]

    def is_open(self) -> bool:
        return self.session_uri is not None

    def connect(self, uri: str, password: str) -> None:
        self.record("connect", uri)
        self.check("connect")
        self.session_uri = uri

    def deploy_sandbox_instance(self, port: int, options: Any) -> None:
        self.record("deploy_sandbox_instance", port)
        self.check("deploy_sandbox_instance", port)

    def stop_sandbox_instance(self, port: int, options: Any) -> None:
        self.record("stop_sandbox_instance", port)
        self.check("stop_sandbox_instance", port)

    def delete_sandbox_instance(self, port: int) -> None:
        self.record("delete_sandbox_instance", port)
        self.check("delete_sandbox_instance", port)

    def start_sandbox_instance(self, port: int) -> None:
        self.record("start_sandbox_instance", port)
        self.check("start_sandbox_instance", port)

    def create_cluster(self, name: str) -> FakeCluster:
        self.record("create_cluster", name)
        self.check("create_cluster")
        self.members = [address_of(self.session_uri or "")]
        return FakeCluster(name, self)

    def get_cluster(self) -> FakeCluster:
        self.record("get_cluster")
        self.check("get_cluster")
        if not self.members:
            self.members = list(DEFAULT_MEMBERS)
        return FakeCluster(self.cluster_name, self)

    def reboot_cluster_from_complete_outage(self, name: str, options: Any) -> FakeCluster:
        self.record("reboot_cluster_from_complete_outage", name)
        self.check("reboot_cluster_from_complete_outage")
        if not self.members:
            self.members = list(DEFAULT_MEMBERS)
        return FakeCluster(name, self)

    def configure_local_instance(self, target: str, options: Any) -> None:
        self.record("configure_local_instance", target, options)
        port = int(target.rsplit(":", 1)[1])
        self.check("configure_local_instance", port)


@pytest.fixture
def gateway() -> FakeGateway:
    """Fixture providing a fresh FakeGateway."""
    return FakeGateway()


@pytest.fixture
def context(gateway: FakeGateway) -> ClusterContext:
    """Fixture providing a cluster context without a session store."""
    return ClusterContext(gateway)


@pytest.fixture
def no_sleep():
    """Patch out sleeps in the poller and the workflows."""
    with patch("icadmin.cluster.workflows.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def messages() -> list[str]:
    """Progress lines collected from a workflow's notify callback."""
    return []


@pytest.fixture
def workflows(context: ClusterContext, messages: list[str], no_sleep) -> ClusterWorkflows:
    """Fixture providing workflows with a short, sleepless poller."""
    poller = ConvergencePoller(max_attempts=3, interval_seconds=0)
    return ClusterWorkflows(context, poller=poller, notify=messages.append)
