"""MySQL Shell implementation of the administration gateway.

Every call runs one ``mysqlsh --py -e`` process. The scripts are fixed
templates; arguments (including passwords) travel as JSON in the child's
environment so they never appear on a command line. A "session" is the last
URI and password that connected successfully; session-bound scripts reconnect
with them first.
"""

from __future__ import annotations

import json
import os
import subprocess
from typing import Any

from ..shared.logging import get_logger
from .errors import GatewayError
from .gateway import (
    AddInstanceOptions,
    ClusterDescription,
    ConfigureOptions,
    RebootOptions,
    SandboxOptions,
    TopologyView,
)

logger = get_logger(__name__)

ARGS_ENV = "ICADMIN_ARGS"

_PRELUDE = "import json, os\nargs = json.loads(os.environ['" + ARGS_ENV + "'])\n"
_CONNECT = "shell.connect(args['session_uri'], args['session_password'])\n"

SCRIPTS = {
    "connect": _CONNECT + "print(json.dumps({'connected': True}))",
    "deploy_sandbox_instance": (
        "dba.deploy_sandbox_instance(args['port'], {'password': args['password']})"
    ),
    "stop_sandbox_instance": (
        "dba.stop_sandbox_instance(args['port'], {'password': args['password']})"
    ),
    "delete_sandbox_instance": "dba.delete_sandbox_instance(args['port'])",
    "start_sandbox_instance": "dba.start_sandbox_instance(args['port'])",
    "create_cluster": (
        "c = dba.create_cluster(args['name'])\nprint(json.dumps({'name': c.get_name()}))"
    ),
    "get_cluster": "c = dba.get_cluster()\nprint(json.dumps({'name': c.get_name()}))",
    "reboot_cluster_from_complete_outage": (
        "c = dba.reboot_cluster_from_complete_outage(args['name'], args['options'])\n"
        "print(json.dumps({'name': c.get_name()}))"
    ),
    "configure_local_instance": "dba.configure_local_instance(args['target'], args['options'])",
    "status": "print(dba.get_cluster(args['name']).status())",
    "describe": "print(dba.get_cluster(args['name']).describe())",
    "add_instance": "dba.get_cluster(args['name']).add_instance(args['uri'], args['options'])",
}

# Operations that need an open session on the target cluster
SESSION_OPERATIONS = {
    "create_cluster",
    "get_cluster",
    "reboot_cluster_from_complete_outage",
    "status",
    "describe",
    "add_instance",
}


def _configure_options(options: ConfigureOptions) -> dict[str, Any]:
    data = {
        "password": options.password,
        "mycnfPath": options.mycnf_path,
        "clusterAdmin": options.cluster_admin,
        "clusterAdminPassword": options.cluster_admin_password,
    }
    return {key: value for key, value in data.items() if value is not None}


def _parse_json(output: str, operation: str) -> dict[str, Any]:
    """Parse the JSON document a script printed, ignoring any preamble."""
    start = output.find("{")
    if start < 0:
        raise GatewayError(f"No output from MySQL Shell for {operation}", operation=operation)
    try:
        data, _ = json.JSONDecoder().raw_decode(output, start)
    except json.JSONDecodeError as e:
        raise GatewayError(
            f"Unexpected output from MySQL Shell for {operation}: {e}", operation=operation
        ) from e
    return data


class ShellCluster:
    """Cluster handle backed by MySQL Shell."""

    def __init__(self, name: str, gateway: MySQLShellGateway):
        self.name = name
        self.gateway = gateway

    def __repr__(self) -> str:
        return f"ShellCluster(name={self.name!r})"

    def status(self) -> TopologyView:
        data = self.gateway.call_json("status", {"name": self.name})
        return TopologyView.from_status(data)

    def describe(self) -> ClusterDescription:
        data = self.gateway.call_json("describe", {"name": self.name})
        return ClusterDescription.from_describe(data)

    def add_instance(self, uri: str, options: AddInstanceOptions) -> None:
        self.gateway.call(
            "add_instance",
            {"name": self.name, "uri": uri, "options": {"password": options.password}},
        )


class MySQLShellGateway:
    """Administration gateway driving MySQL Shell's AdminAPI."""

    def __init__(self, shell_path: str = "mysqlsh", timeout: float = 300):
        """Initialize the gateway.

        Args:
            shell_path: MySQL Shell executable.
            timeout: Seconds allowed for a single shell call.
        """
        self.shell_path = shell_path
        self.timeout = timeout
        self._uri: str | None = None
        self._password: str | None = None

    @property
    def session_uri(self) -> str | None:
        return self._uri

    def is_open(self) -> bool:
        return self._uri is not None

    def call(self, operation: str, args: dict[str, Any] | None = None) -> str:
        """Run one operation script and return its standard output.

        Args:
            operation: Key into SCRIPTS
            args: Arguments exposed to the script as ``args``

        Returns:
            Captured standard output

        Raises:
            GatewayError: The shell is missing, timed out or reported an error.
        """
        payload = dict(args or {})
        script = _PRELUDE
        if operation in SESSION_OPERATIONS:
            if not self.is_open():
                raise GatewayError("No open session. Connect to an instance first.", operation)
            payload["session_uri"] = self._uri
            payload["session_password"] = self._password
            script += _CONNECT
        script += SCRIPTS[operation]

        env = os.environ.copy()
        env[ARGS_ENV] = json.dumps(payload)

        logger.debug("shell.call", operation=operation, session=self._uri)
        try:
            result = subprocess.run(
                [self.shell_path, "--no-wizard", "--py", "-e", script],
                capture_output=True,
                text=True,
                env=env,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GatewayError(
                f"MySQL Shell not found at '{self.shell_path}'. Is it installed?", operation
            ) from e
        except subprocess.TimeoutExpired as e:
            raise GatewayError(
                f"MySQL Shell did not finish {operation} within {self.timeout}s", operation
            ) from e

        if result.returncode != 0:
            message = (result.stderr or "").strip() or (result.stdout or "").strip()
            logger.debug("shell.failed", operation=operation, returncode=result.returncode)
            raise GatewayError(message or f"{operation} failed", operation)

        return result.stdout

    def call_json(self, operation: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run an operation whose script prints a JSON document."""
        return _parse_json(self.call(operation, args), operation)

    def connect(self, uri: str, password: str) -> None:
        self.call("connect", {"session_uri": uri, "session_password": password})
        self._uri = uri
        self._password = password
        logger.info("shell.connected", uri=uri)

    def deploy_sandbox_instance(self, port: int, options: SandboxOptions) -> None:
        self.call("deploy_sandbox_instance", {"port": port, "password": options.password})

    def stop_sandbox_instance(self, port: int, options: SandboxOptions) -> None:
        self.call("stop_sandbox_instance", {"port": port, "password": options.password})

    def delete_sandbox_instance(self, port: int) -> None:
        self.call("delete_sandbox_instance", {"port": port})

    def start_sandbox_instance(self, port: int) -> None:
        self.call("start_sandbox_instance", {"port": port})

    def create_cluster(self, name: str) -> ShellCluster:
        data = self.call_json("create_cluster", {"name": name})
        return ShellCluster(data.get("name", name), self)

    def get_cluster(self) -> ShellCluster:
        data = self.call_json("get_cluster")
        return ShellCluster(data.get("name", ""), self)

    def reboot_cluster_from_complete_outage(
        self, name: str, options: RebootOptions
    ) -> ShellCluster:
        data = self.call_json(
            "reboot_cluster_from_complete_outage",
            {
                "name": name,
                "options": {
                    "password": options.password,
                    "rejoinInstances": list(options.rejoin_instances),
                    "removeInstances": list(options.remove_instances),
                },
            },
        )
        return ShellCluster(data.get("name", name), self)

    def configure_local_instance(self, target: str, options: ConfigureOptions) -> None:
        self.call(
            "configure_local_instance",
            {"target": target, "options": _configure_options(options)},
        )
