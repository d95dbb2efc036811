"""Convergence polling for cluster membership changes.

After an operation that changes membership or power state, members need a few
seconds to report ONLINE. The poller re-fetches a topology snapshot until a
predicate holds or the attempts run out.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import NamedTuple

from ..shared.logging import get_logger
from .gateway import TopologyView

logger = get_logger(__name__)

Predicate = Callable[[TopologyView], bool]


class ConvergenceResult(NamedTuple):
    """Last fetched view and whether the predicate held."""

    view: TopologyView | None
    converged: bool


def primary_online(view: TopologyView) -> bool:
    """The primary member reports ONLINE."""
    primary = view.member(view.primary)
    return primary is not None and primary.online


def all_online(view: TopologyView) -> bool:
    """Every member in the topology reports ONLINE.

    A topology without members never counts as online.
    """
    return bool(view.members) and all(member.online for member in view.members)


class ConvergencePoller:
    """Poll a topology snapshot until it converges."""

    def __init__(self, max_attempts: int = 10, interval_seconds: float = 1.0):
        """Initialize convergence poller.

        Args:
            max_attempts: Maximum number of fetches.
            interval_seconds: Seconds to sleep after a failed check.
        """
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds

    def wait(
        self,
        fetch: Callable[[], TopologyView],
        predicate: Predicate,
        on_attempt: Callable[[int, int, TopologyView], None] | None = None,
    ) -> ConvergenceResult:
        """Fetch and test until the predicate holds or attempts run out.

        Running out of attempts is not an error. The caller decides how to
        report a cluster that has not converged yet.

        Args:
            fetch: Returns a fresh topology snapshot.
            predicate: Convergence test applied to each snapshot.
            on_attempt: Optional callback called with (attempt, max_attempts, view)
                       after each failed check, for progress reporting.

        Returns:
            ConvergenceResult with the last view and the outcome.
        """
        view: TopologyView | None = None
        check = getattr(predicate, "__name__", "predicate")

        for attempt in range(1, self.max_attempts + 1):
            view = fetch()
            if predicate(view):
                logger.debug("poll.converged", attempt=attempt, check=check)
                return ConvergenceResult(view, True)

            logger.debug("poll.attempt", attempt=attempt, max_attempts=self.max_attempts)
            if on_attempt:
                on_attempt(attempt, self.max_attempts, view)

            if attempt < self.max_attempts:
                time.sleep(self.interval_seconds)

        logger.info("poll.timeout", attempts=self.max_attempts, check=check)
        return ConvergenceResult(view, False)
