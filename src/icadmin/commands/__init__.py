"""Cluster commands registered on the icadmin CLI."""

from .production import PRODUCTION_COMMANDS
from .sandbox import SANDBOX_COMMANDS

CLUSTER_COMMANDS = SANDBOX_COMMANDS + PRODUCTION_COMMANDS

__all__ = ["CLUSTER_COMMANDS"]
