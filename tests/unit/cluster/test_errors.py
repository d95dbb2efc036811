"""Unit tests for icadmin.cluster.errors module."""

import pytest

from icadmin.cluster.errors import (
    ClusterAdminError,
    ClusterOperationError,
    GatewayError,
    InstanceOperationError,
    NoActiveClusterError,
    ProvisioningError,
    RebootError,
)


@pytest.mark.cli_unit
class TestErrors:
    """Tests for the workflow error taxonomy."""

    def test_wrap_keeps_cause(self):
        error = ClusterOperationError.wrap(
            "The InnoDB cluster could not be created.", GatewayError("Access denied")
        )

        assert isinstance(error, ClusterOperationError)
        assert error.message == "The InnoDB cluster could not be created. Message: Access denied"
        assert error.cause == "Access denied"
        assert str(error) == error.message

    def test_reboot_and_provisioning_are_cluster_errors(self):
        assert issubclass(ProvisioningError, ClusterOperationError)
        assert issubclass(RebootError, ClusterOperationError)

    def test_instance_error_carries_port(self):
        error = InstanceOperationError.wrap("Could not remove the instance.", GatewayError("gone"))
        error.port = 3340

        assert error.port == 3340
        assert isinstance(error, ClusterAdminError)

    def test_no_active_cluster_default_message(self):
        assert NoActiveClusterError().message.startswith("No cluster defined yet.")

    def test_gateway_error_operation(self):
        error = GatewayError("boom", "status")
        assert str(error) == "boom"
        assert error.operation == "status"
