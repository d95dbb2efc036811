"""Sandbox cluster commands.

Sandbox instances are disposable local servers on ports 3310, 3320, ... 3390.
"""

from __future__ import annotations

import click

from ..decorators import handle_admin_errors
from .common import STATUS_HINT, echo_banner, get_workflows, report_result
from .inputs import DEFAULT_INSTANCE_COUNT, resolve_int, resolve_password

SANDBOX_PASSWORD_PROMPT = "Please enter the root password for the sandbox cluster"


@click.command("deploySandboxCluster")
@click.argument("instance_count", required=False)
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def deploy_sandbox_cluster(ctx: click.Context, instance_count, root_password) -> None:
    """Deploy and start a ready-to-use sandbox cluster.

    INSTANCE_COUNT is the number of sandbox instances (1-9, default 3).
    ROOT_PASSWORD is set for the root account of every instance.
    """
    echo_banner(
        ctx,
        "MySQL InnoDB Cluster Sandbox Setup",
        "The instances will be installed in:",
        "  Unix-like systems: ~/mysql-sandboxes",
        "  Windows: %userprofile%\\MySQL\\mysql-sandboxes",
    )
    count = resolve_int(
        instance_count,
        "Please enter the number of instances for this sandbox cluster (1-9)",
        DEFAULT_INSTANCE_COUNT,
    )
    password = resolve_password(
        root_password,
        "Please enter the password that will be set for the root account (4 characters or more)",
    )
    result = get_workflows(ctx).deploy_sandbox_cluster(count, password)
    report_result(ctx, result, STATUS_HINT)


@click.command("deleteSandboxInstances")
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def delete_sandbox_instances(ctx: click.Context, root_password) -> None:
    """Delete all sandbox instances and the sandbox cluster."""
    echo_banner(ctx, "MySQL InnoDB Sandbox Instance Deletion")
    password = resolve_password(root_password, SANDBOX_PASSWORD_PROMPT)
    result = get_workflows(ctx).delete_sandbox_instances(password)
    report_result(ctx, result)


@click.command("stopSandboxInstances")
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def stop_sandbox_instances(ctx: click.Context, root_password) -> None:
    """Stop all sandbox instances."""
    echo_banner(ctx, "MySQL Sandbox Instances Shutdown")
    password = resolve_password(root_password, SANDBOX_PASSWORD_PROMPT)
    result = get_workflows(ctx).stop_sandbox_instances(password)
    report_result(ctx, result)


@click.command("startSandboxCluster")
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def start_sandbox_cluster(ctx: click.Context, root_password) -> None:
    """Start the sandbox cluster after it has been shut down."""
    echo_banner(ctx, "MySQL Sandbox Cluster Start")
    password = resolve_password(root_password, SANDBOX_PASSWORD_PROMPT)
    result = get_workflows(ctx).start_sandbox_cluster(password)
    report_result(ctx, result, STATUS_HINT)


@click.command("restartSandboxCluster")
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def restart_sandbox_cluster(ctx: click.Context, root_password) -> None:
    """Stop and restart the sandbox cluster."""
    echo_banner(ctx, "MySQL Sandbox Cluster Restart")
    password = resolve_password(root_password, SANDBOX_PASSWORD_PROMPT)
    result = get_workflows(ctx).restart_sandbox_cluster(password)
    report_result(ctx, result, STATUS_HINT)


SANDBOX_COMMANDS = [
    deploy_sandbox_cluster,
    delete_sandbox_instances,
    stop_sandbox_instances,
    start_sandbox_cluster,
    restart_sandbox_cluster,
]
