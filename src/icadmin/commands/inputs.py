"""Input resolution for cluster commands.

Arguments left out on the command line are prompted for here, before any
workflow runs. Values are passed on as typed; validation belongs to the
workflows.
"""

from __future__ import annotations

from typing import Any

import click

DEFAULT_INSTANCE_COUNT = "3"
DEFAULT_CLUSTER_ADMIN = "dba"
DEFAULT_CLUSTER_NAME = "devCluster"
DEFAULT_INSTANCE_PORT = "3306"


def as_int(value: Any) -> Any:
    """Convert integer text to ``int``; anything else is returned unchanged."""
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return value


def resolve_text(value: str | None, prompt: str, default: str | None = None) -> str:
    if value is not None:
        return value
    return click.prompt(prompt, default=default, show_default=default is not None)


def resolve_optional_text(value: str | None, prompt: str) -> str:
    """Prompt for a value that may be left empty."""
    if value is not None:
        return value
    return click.prompt(prompt, default="", show_default=False)


def resolve_int(value: str | None, prompt: str, default: str) -> Any:
    return as_int(resolve_text(value, prompt, default))


def resolve_password(value: str | None, prompt: str, confirm: bool = False) -> str:
    """Prompt for a password with hidden input.

    Args:
        value: Password given on the command line, if any.
        prompt: Prompt text.
        confirm: Ask twice and require both entries to match.
    """
    if value is not None:
        return value
    return click.prompt(
        prompt,
        hide_input=True,
        confirmation_prompt="Please repeat the password" if confirm else False,
    )
