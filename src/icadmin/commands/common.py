"""Helpers shared by the cluster commands."""

from __future__ import annotations

import json

import click

from ..cluster import (
    ClusterContext,
    ClusterWorkflows,
    ConvergencePoller,
    MySQLShellGateway,
    SessionStore,
    WorkflowResult,
)
from ..config import CLIConfig
from ..formatters import print_banner

STATUS_HINT = "Run 'icadmin status' to get status information about the cluster."


def get_cluster_context(ctx: click.Context) -> ClusterContext:
    """Return the invocation's cluster context, creating it on first use."""
    obj = ctx.ensure_object(dict)
    if "cluster_context" not in obj:
        config: CLIConfig = obj["config"]
        gateway = MySQLShellGateway(shell_path=config.shell_path, timeout=config.shell_timeout)
        obj["cluster_context"] = ClusterContext(gateway, SessionStore())
    return obj["cluster_context"]


def get_workflows(ctx: click.Context) -> ClusterWorkflows:
    config: CLIConfig = ctx.obj["config"]
    poller = ConvergencePoller(
        max_attempts=config.poll_attempts,
        interval_seconds=config.poll_interval,
    )
    notify = None if ctx.obj.get("json_output") else click.echo
    return ClusterWorkflows(get_cluster_context(ctx), poller=poller, notify=notify)


def echo_banner(ctx: click.Context, title: str, *lines: str) -> None:
    if ctx.obj.get("json_output"):
        return
    print_banner(title)
    for line in lines:
        click.echo(line)
    click.echo()


def report_result(ctx: click.Context, result: WorkflowResult, hint: str | None = None) -> None:
    """Print the outcome of a workflow.

    Args:
        ctx: Click context
        result: Workflow result
        hint: Optional follow-up suggestion shown after the success line
    """
    if ctx.obj.get("json_output"):
        data = {
            "success": True,
            "message": result.message,
            "cluster": getattr(result.handle, "name", None),
            "converged": result.converged,
            "instance_errors": [
                {"port": e.port, "message": e.message} for e in result.instance_errors
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if result.instance_errors:
        click.echo(f"\n{len(result.instance_errors)} instance operation(s) did not succeed.")
    click.echo(f"\nSUCCESS: {result.message}")
    if hint:
        click.echo(hint)
