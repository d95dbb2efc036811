"""CLI output formatting helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
import yaml

if TYPE_CHECKING:
    from .cluster.gateway import TopologyView

RULE = "-" * 41


def format_cluster_status(view: TopologyView) -> str:
    """Render a topology snapshot as human-readable text.

    Args:
        view: Status snapshot of a cluster

    Returns:
        Multi-line status report
    """
    count = len(view.members)
    lines = [
        "MySQL InnoDB Cluster Status",
        "===========================",
        f"Cluster Name:      {view.cluster_name}",
        f"Cluster Status:    {view.status_text}",
        f"Status Code:       {view.status}",
        RULE,
        f"Primary Instance:  {view.primary}",
        RULE,
        f"HA Topology:       {count} instance{'s' if count != 1 else ''}",
    ]
    for member in view.members:
        lines.append(f"- {member.address} ({member.mode}) - Status: {member.status}")
    return "\n".join(lines)


def print_banner(title: str) -> None:
    """Print a workflow title underlined the width of the title."""
    click.echo(f"\n{title}")
    click.echo("=" * len(title))


def print_config_values(values: dict[str, Any], sources: dict[str, str]) -> None:
    """Print CLI configuration values with where each came from.

    Args:
        values: Config key to value
        sources: Config key to source (default, config file, environment)
    """
    click.echo("icadmin CLI Configuration\n")
    click.echo(yaml.dump(values, default_flow_style=False, sort_keys=False).rstrip())
    click.echo("\nSources:")
    for key in values:
        click.echo(f"  {key}: {sources.get(key, 'default')}")
