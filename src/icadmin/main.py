"""CLI main entry point."""

import json
import sys

import click

from . import __version__
from .commands import CLUSTER_COMMANDS
from .config import CONVERTERS, load_config, save_config, unset_config
from .decorators import PassThroughGroup
from .formatters import print_config_values
from .shared.logging import configure_logging, level_for_verbosity


@click.group(cls=PassThroughGroup)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append the event log to a file as JSON lines instead of stderr",
)
@click.pass_context
def cli(ctx: click.Context, verbose: int, json_output: bool, log_file: str | None) -> None:
    """InnoDB cluster administration.

    Deploys sandbox clusters on local ports 3310-3390, prepares and clusters
    production instances, and reports cluster status. Unknown commands are
    ignored.
    """
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config()
    config = ctx.obj["config"]
    ctx.obj["json_output"] = json_output
    configure_logging(
        level_for_verbosity(verbose, config.log_level),
        log_file=log_file,
        json_output=log_file is not None,
    )


for command in CLUSTER_COMMANDS:
    cli.add_command(command)


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"icadmin version {__version__}")


@cli.group()
def config() -> None:
    """Manage CLI configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration and where each value came from."""
    cfg = ctx.obj["config"]
    values = cfg.values()
    sources = {key: cfg.get_source(key) for key in values}

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"values": values, "sources": sources}, indent=2))
    else:
        print_config_values(values, sources)


@config.command("set")
@click.argument("key", type=click.Choice(sorted(CONVERTERS)))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Save a configuration value."""
    try:
        save_config(key, value)
    except ValueError:
        click.echo(f"Error: Invalid value for {key}: {value}", err=True)
        sys.exit(1)
    click.echo(f"✓ {key} = {value}")


@config.command("unset")
@click.argument("key")
def config_unset(key: str) -> None:
    """Remove a configuration value (falls back to the default)."""
    if unset_config(key):
        click.echo(f"✓ {key} removed")
    else:
        click.echo(f"{key} is not set in the config file")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
