"""Options dataclass for the ci-wait command."""

from dataclasses import dataclass

import click

from ci_wait.poll_loop import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_UNREACHABLE_AFTER,
    UnreachableRunPolicy,
)
from ci_wait.run_discovery import DEFAULT_ATTEMPTS, DEFAULT_INTERVAL


@dataclass
class WaitOpts:
    """All options for the ci-wait command."""

    run_id: str | None = None
    keep_going: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    discovery_attempts: int = DEFAULT_ATTEMPTS
    discovery_interval: float = DEFAULT_INTERVAL
    unreachable_runs: str = UnreachableRunPolicy.EXCLUDE.value
    unreachable_after: int = DEFAULT_UNREACHABLE_AFTER

    @property
    def fail_fast(self) -> bool:
        return not self.keep_going

    @property
    def unreachable_policy(self) -> UnreachableRunPolicy:
        return UnreachableRunPolicy(self.unreachable_runs)

    def validate(self):
        """Raise click.UsageError for option values the loop cannot run with."""
        problems = []
        if self.poll_interval <= 0:
            problems.append("--poll-interval must be positive")
        if self.discovery_attempts < 1:
            problems.append("discovery attempts must be at least 1")
        if self.discovery_interval < 0:
            problems.append("discovery interval must not be negative")
        if self.unreachable_after < 1:
            problems.append("--unreachable-after must be at least 1")
        if self.unreachable_runs not in [p.value for p in UnreachableRunPolicy]:
            problems.append(f"unknown --unreachable-runs policy: {self.unreachable_runs}")
        if problems:
            raise click.UsageError("; ".join(problems))
