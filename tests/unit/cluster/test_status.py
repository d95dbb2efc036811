"""Unit tests for cluster status parsing and reporting."""

import pytest

from icadmin.cluster import (
    ClusterDescription,
    ClusterOperationError,
    NoActiveClusterError,
    StatusReporter,
    TopologyView,
)
from icadmin.formatters import format_cluster_status

from conftest import FakeCluster

STATUS_DOCUMENT = {
    "clusterName": "sandboxCluster",
    "defaultReplicaSet": {
        "name": "default",
        "primary": "localhost:3310",
        "status": "OK",
        "statusText": "Cluster is ONLINE and can tolerate up to ONE failure.",
        "topology": {
            "localhost:3310": {
                "address": "localhost:3310",
                "memberRole": "PRIMARY",
                "mode": "R/W",
                "status": "ONLINE",
            },
            "localhost:3320": {
                "address": "localhost:3320",
                "memberRole": "SECONDARY",
                "mode": "R/O",
                "status": "RECOVERING",
            },
        },
    },
}


@pytest.mark.cli_unit
class TestTopologyView:
    """Tests for TopologyView parsing."""

    def test_from_status(self):
        view = TopologyView.from_status(STATUS_DOCUMENT)

        assert view.cluster_name == "sandboxCluster"
        assert view.status == "OK"
        assert view.primary == "localhost:3310"
        assert [m.address for m in view.members] == ["localhost:3310", "localhost:3320"]
        assert view.members[0].role == "PRIMARY"
        assert view.members[0].online is True
        assert view.members[1].online is False

    def test_member_lookup(self):
        view = TopologyView.from_status(STATUS_DOCUMENT)

        assert view.member("localhost:3320").mode == "R/O"
        assert view.member("localhost:9999") is None

    def test_empty_document(self):
        view = TopologyView.from_status({})

        assert view.cluster_name == ""
        assert view.members == ()

    def test_to_dict(self):
        data = TopologyView.from_status(STATUS_DOCUMENT).to_dict()

        assert data["cluster_name"] == "sandboxCluster"
        assert data["members"][1] == {
            "address": "localhost:3320",
            "mode": "R/O",
            "role": "SECONDARY",
            "status": "RECOVERING",
        }


@pytest.mark.cli_unit
class TestClusterDescription:
    """Tests for ClusterDescription parsing."""

    def test_ports_from_describe(self):
        description = ClusterDescription.from_describe(
            {
                "clusterName": "sandboxCluster",
                "defaultReplicaSet": {
                    "instances": [
                        {"host": "localhost:3310", "label": "localhost:3310"},
                        {"address": "localhost:3320"},
                        {"host": "localhost:3330"},
                    ]
                },
            }
        )

        assert description.cluster_name == "sandboxCluster"
        assert description.ports == [3310, 3320, 3330]

    def test_no_instances(self):
        assert ClusterDescription.from_describe({}).ports == []


@pytest.mark.cli_unit
class TestFormatClusterStatus:
    """Tests for format_cluster_status."""

    def test_full_report(self):
        text = format_cluster_status(TopologyView.from_status(STATUS_DOCUMENT))

        lines = text.splitlines()
        assert lines[0] == "MySQL InnoDB Cluster Status"
        assert "Cluster Name:      sandboxCluster" in lines
        assert "Status Code:       OK" in lines
        assert "Primary Instance:  localhost:3310" in lines
        assert "HA Topology:       2 instances" in lines
        assert lines[-2:] == [
            "- localhost:3310 (R/W) - Status: ONLINE",
            "- localhost:3320 (R/O) - Status: RECOVERING",
        ]

    def test_single_instance(self):
        document = {
            "clusterName": "c",
            "defaultReplicaSet": {"topology": {"h:1": {"status": "ONLINE"}}},
        }
        text = format_cluster_status(TopologyView.from_status(document))

        assert "HA Topology:       1 instance" in text.splitlines()
        assert "- h:1 () - Status: ONLINE" in text


@pytest.mark.cli_unit
class TestStatusReporter:
    """Tests for StatusReporter."""

    def test_status_of_active_cluster(self, context, gateway):
        gateway.members = ["localhost:3310", "localhost:3320"]
        context.set_active(FakeCluster("sandboxCluster", gateway))

        text = StatusReporter(context).status()

        assert "Cluster Name:      sandboxCluster" in text
        assert "HA Topology:       2 instances" in text
        assert gateway.names() == ["status"]

    def test_snapshot_does_not_mutate(self, context, gateway):
        gateway.members = ["localhost:3310"]
        context.set_active(FakeCluster("sandboxCluster", gateway))

        StatusReporter(context).snapshot()

        assert set(gateway.names()) == {"status"}

    def test_no_active_cluster(self, context, gateway):
        with pytest.raises(NoActiveClusterError):
            StatusReporter(context).status("pass1234")
        assert gateway.calls == []

    def test_resolves_through_open_session(self, context, gateway):
        gateway.session_uri = "root@localhost:3310"

        view = StatusReporter(context).snapshot()

        assert gateway.names() == ["get_cluster", "status"]
        assert view.cluster_name == "devCluster"

    def test_status_call_failure(self, context, gateway):
        gateway.fail["status"] = "Lost connection to MySQL server"
        context.set_active(FakeCluster("sandboxCluster", gateway))

        with pytest.raises(ClusterOperationError, match="Lost connection"):
            StatusReporter(context).status()
