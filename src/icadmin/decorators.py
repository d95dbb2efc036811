"""Command decorators and click classes.

This module provides the error boundary for cluster commands and the command
group that ignores unknown command names.
"""

from functools import wraps
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape

from .cluster.errors import ClusterAdminError

console = Console(stderr=True)


def handle_admin_errors(func: Callable):
    """Decorator that turns workflow errors into a red message and exit code 1.

    Args:
        func: Command callback.

    Returns:
        Decorated callback.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClusterAdminError as e:
            console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False, soft_wrap=True)
            raise SystemExit(1) from e

    return wrapper


def _ignore(**kwargs) -> None:
    """Accept and discard any arguments."""


class PassThroughGroup(click.Group):
    """Command group that silently ignores unknown command names.

    Callers such as the desktop launcher pass a command name as the first
    argument; names this tool does not know are a no-op with exit code 0.
    """

    def resolve_command(self, ctx: click.Context, args: list[str]):
        cmd_name = args[0] if args else None
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            ignored = click.Command(
                cmd_name,
                callback=_ignore,
                add_help_option=False,
                context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
            )
            return cmd_name, ignored, args[1:]
        return super().resolve_command(ctx, args)
