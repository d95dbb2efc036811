"""Production cluster commands and cluster status."""

from __future__ import annotations

import json

import click

from ..cluster import StatusReporter
from ..decorators import handle_admin_errors
from .common import (
    STATUS_HINT,
    echo_banner,
    get_cluster_context,
    get_workflows,
    report_result,
)
from .inputs import (
    DEFAULT_CLUSTER_ADMIN,
    DEFAULT_CLUSTER_NAME,
    DEFAULT_INSTANCE_PORT,
    resolve_int,
    resolve_optional_text,
    resolve_password,
    resolve_text,
)

ADMIN_PROMPT = "Please enter a name for the InnoDB cluster administrator"
ADMIN_PASSWORD_PROMPT = "Please enter a password for the InnoDB cluster administrator"
EXTERNAL_HOST_PROMPT = (
    "Please enter the domain name or IP address of this machine "
    "(an external address, not 127.0.0.1 or localhost)"
)


@click.command("prepareLocalInstance")
@click.argument("admin", required=False)
@click.argument("admin_password", required=False)
@click.argument("port", required=False)
@click.argument("root_password", required=False)
@click.argument("cnf_path", required=False)
@click.pass_context
@handle_admin_errors
def prepare_local_instance(
    ctx: click.Context, admin, admin_password, port, root_password, cnf_path
) -> None:
    """Prepare a local instance for InnoDB cluster usage.

    Usually needs to run with administrator rights so the option file can be
    written.
    """
    echo_banner(ctx, "MySQL InnoDB Cluster Instance Preparation")
    admin = resolve_text(admin, ADMIN_PROMPT, DEFAULT_CLUSTER_ADMIN)
    admin_password = resolve_password(
        admin_password, f"{ADMIN_PASSWORD_PROMPT} (at least 4 characters)", confirm=True
    )
    port = resolve_int(
        port, "Please enter the TCP port the MySQL instance is running on", DEFAULT_INSTANCE_PORT
    )
    root_password = resolve_password(
        root_password, "Please enter the root password of the MySQL instance"
    )
    cnf_path = resolve_optional_text(
        cnf_path,
        "Please enter the full path to the my.cnf/my.ini file or press enter "
        "to use the default location",
    )
    result = get_workflows(ctx).prepare_local_instance(
        admin, admin_password, port, root_password, cnf_path
    )
    report_result(ctx, result)


@click.command("createProductionCluster")
@click.argument("name", required=False)
@click.argument("admin", required=False)
@click.argument("admin_password", required=False)
@click.argument("hostname", required=False)
@click.argument("port", required=False)
@click.pass_context
@handle_admin_errors
def create_production_cluster(
    ctx: click.Context, name, admin, admin_password, hostname, port
) -> None:
    """Create a ready-to-use production cluster seeded by this machine."""
    echo_banner(ctx, "MySQL InnoDB Cluster Setup")
    name = resolve_text(name, "Please enter a name for the InnoDB cluster", DEFAULT_CLUSTER_NAME)
    admin = resolve_text(admin, ADMIN_PROMPT, DEFAULT_CLUSTER_ADMIN)
    admin_password = resolve_password(admin_password or None, ADMIN_PASSWORD_PROMPT)
    hostname = resolve_text(hostname, EXTERNAL_HOST_PROMPT)
    port = resolve_int(
        port, "Please enter the TCP port the MySQL instance is running on", DEFAULT_INSTANCE_PORT
    )
    result = get_workflows(ctx).create_production_cluster(
        name, admin, admin_password, hostname, port
    )
    report_result(ctx, result, STATUS_HINT)


@click.command("addLocalInstanceToCluster")
@click.argument("admin", required=False)
@click.argument("admin_password", required=False)
@click.argument("cluster_host", required=False)
@click.argument("cluster_port", required=False)
@click.argument("local_root_password", required=False)
@click.argument("local_host", required=False)
@click.argument("local_port", required=False)
@click.pass_context
@handle_admin_errors
def add_local_instance_to_cluster(
    ctx: click.Context,
    admin,
    admin_password,
    cluster_host,
    cluster_port,
    local_root_password,
    local_host,
    local_port,
) -> None:
    """Add a local MySQL Server instance to an existing InnoDB cluster."""
    admin = resolve_text(admin, ADMIN_PROMPT, DEFAULT_CLUSTER_ADMIN)
    admin_password = resolve_password(admin_password or None, ADMIN_PASSWORD_PROMPT)
    cluster_host = resolve_text(
        cluster_host, "Please enter the hostname of one of the cluster instances"
    )
    cluster_port = resolve_int(
        cluster_port,
        "Please enter the TCP port the cluster instance is running on",
        DEFAULT_INSTANCE_PORT,
    )
    local_root_password = resolve_password(
        local_root_password or None,
        "Please enter the password for the root account of the local MySQL instance",
    )
    local_host = resolve_text(local_host, EXTERNAL_HOST_PROMPT)
    local_port = resolve_int(
        local_port,
        "Please enter the TCP port the local MySQL instance is running on",
        DEFAULT_INSTANCE_PORT,
    )
    echo_banner(ctx, "Add Local Instance to MySQL InnoDB Cluster")
    result = get_workflows(ctx).add_local_instance_to_cluster(
        admin,
        admin_password,
        cluster_host,
        cluster_port,
        local_root_password,
        local_host,
        local_port,
    )
    report_result(ctx, result)


@click.command("status")
@click.argument("root_password", required=False)
@click.pass_context
@handle_admin_errors
def status(ctx: click.Context, root_password) -> None:
    """Show the status of the active cluster.

    ROOT_PASSWORD is only needed to reopen the session remembered from an
    earlier command.
    """
    reporter = StatusReporter(get_cluster_context(ctx))
    if ctx.obj.get("json_output"):
        view = reporter.snapshot(root_password)
        click.echo(json.dumps(view.to_dict(), indent=2))
    else:
        click.echo()
        click.echo(reporter.status(root_password))
        click.echo()


PRODUCTION_COMMANDS = [
    prepare_local_instance,
    create_production_cluster,
    add_local_instance_to_cluster,
    status,
]
