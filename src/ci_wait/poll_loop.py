"""PollLoop: watches runs until they complete, redrawing only when job state changes."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

import click

from ci_wait.console import print_info, print_warn
from ci_wait.errors import RunDetailUnavailable
from ci_wait.snapshots import (
    COMPLETED,
    JobDisplay,
    RunSnapshotFetcher,
    completion_percent,
    state_fingerprint,
)

DEFAULT_POLL_INTERVAL = 5
DEFAULT_UNREACHABLE_AFTER = 3


class UnreachableRunPolicy(str, Enum):
    """How a run whose detail cannot be fetched affects termination.

    A run is unreachable once its fetch has failed `unreachable_after`
    times in a row.
    """

    EXCLUDE = "exclude"
    BLOCK = "block"
    FAIL = "fail"


@dataclass(frozen=True)
class PollState:
    """Everything carried from one tick to the next."""

    fingerprint: tuple = ()
    rendered_lines: int = 0
    has_rendered: bool = False
    last_status: Dict[int, str] = field(default_factory=dict)
    fetch_failures: Dict[int, int] = field(default_factory=dict)
    failure_observed: bool = False


@dataclass(frozen=True)
class TickResult:
    snapshots: tuple
    total_jobs: int
    completed_jobs: int
    has_failure: bool
    all_done: bool
    rendered: bool
    unreachable: Tuple[int, ...] = ()

    @property
    def percent(self) -> int:
        return completion_percent(self.completed_jobs, self.total_jobs)


@dataclass(frozen=True)
class PollOutcome:
    any_failure: bool
    unreachable: Tuple[int, ...] = ()


def render_job_line(run_name: str, job) -> str:
    state = job.display_state
    if state is JobDisplay.SUCCESS:
        return f"  ✅ {run_name} / {job.name}"
    if state is JobDisplay.SKIPPED:
        return f"  ⏭️  {run_name} / {job.name} (skipped)"
    if state is JobDisplay.FAILED:
        return f"  ❌ {run_name} / {job.name} ({job.conclusion})"
    if state is JobDisplay.IN_PROGRESS:
        return f"  🔄 {run_name} / {job.name}"
    if state is JobDisplay.PENDING:
        return f"  ⏳ {run_name} / {job.name}"
    return f"  ⏳ {run_name} / {job.name} ({job.status})"


def progress_header(completed: int, total: int) -> str:
    return f"Progress: {completed}/{total} ({completion_percent(completed, total)}%)"


def render_block(snapshots, completed: int, total: int):
    """Header line followed by one line per job, in run then job order."""
    lines = [progress_header(completed, total)]
    for snapshot in snapshots:
        for job in snapshot.jobs:
            lines.append(render_job_line(snapshot.name, job))
    return lines


class PollLoop:
    """Polls every monitored run once per tick.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient).
        render_target: Object with write_block(lines) and clear_last_block(line_count).
        poll_interval: Seconds to sleep between ticks.
        unreachable_policy: UnreachableRunPolicy for runs that keep failing to fetch.
        unreachable_after: Consecutive failed fetches before a run is unreachable.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        gh_client,
        render_target,
        poll_interval=DEFAULT_POLL_INTERVAL,
        unreachable_policy=UnreachableRunPolicy.EXCLUDE,
        unreachable_after=DEFAULT_UNREACHABLE_AFTER,
        sleep=time.sleep,
    ):
        self._fetcher = RunSnapshotFetcher(gh_client)
        self._render_target = render_target
        self._poll_interval = poll_interval
        self._unreachable_policy = UnreachableRunPolicy(unreachable_policy)
        self._unreachable_after = unreachable_after
        self._sleep = sleep

    def poll(self, run_ids, fail_fast: bool) -> PollOutcome:
        """Tick until all runs are done, or until a failure when fail_fast is set."""
        print_info("Waiting for all runs to complete...")
        click.echo()

        state = PollState()
        while True:
            result, state = self.tick(run_ids, state)

            if fail_fast and result.has_failure:
                click.echo()
                print_warn("Failure detected, exiting early (use --keep-going to wait for all jobs)")
                return PollOutcome(any_failure=True, unreachable=result.unreachable)

            if result.all_done:
                break

            self._sleep(self._poll_interval)

        click.echo()
        return PollOutcome(any_failure=state.failure_observed, unreachable=result.unreachable)

    def tick(self, run_ids, state: PollState) -> Tuple[TickResult, PollState]:
        """Observe every run once, redraw if anything changed, and fold into the next state."""
        last_status = dict(state.last_status)
        fetch_failures = dict(state.fetch_failures)
        snapshots = []

        for run_id in run_ids:
            try:
                snapshot = self._fetcher.fetch(run_id)
            except RunDetailUnavailable:
                # contributes no jobs this tick; last known status is kept
                fetch_failures[run_id] = fetch_failures.get(run_id, 0) + 1
                continue
            fetch_failures[run_id] = 0
            last_status[run_id] = snapshot.status
            snapshots.append(snapshot)

        jobs = [job for snapshot in snapshots for job in snapshot.jobs]
        total_jobs = len(jobs)
        completed_jobs = sum(1 for job in jobs if job.is_completed)
        has_failure = any(job.is_failure for job in jobs)

        unreachable = tuple(
            run_id for run_id in run_ids
            if fetch_failures.get(run_id, 0) >= self._unreachable_after
        )
        if unreachable and self._unreachable_policy is UnreachableRunPolicy.FAIL:
            has_failure = True

        fingerprint = state_fingerprint(snapshots)
        rendered = fingerprint != state.fingerprint
        rendered_lines = state.rendered_lines
        if rendered:
            lines = render_block(snapshots, completed_jobs, total_jobs)
            if state.has_rendered:
                self._render_target.clear_last_block(state.rendered_lines)
            self._render_target.write_block(lines)
            rendered_lines = len(lines)

        result = TickResult(
            snapshots=tuple(snapshots),
            total_jobs=total_jobs,
            completed_jobs=completed_jobs,
            has_failure=has_failure,
            all_done=self._all_done(run_ids, last_status, unreachable),
            rendered=rendered,
            unreachable=unreachable,
        )
        next_state = PollState(
            fingerprint=fingerprint,
            rendered_lines=rendered_lines,
            has_rendered=state.has_rendered or rendered,
            last_status=last_status,
            fetch_failures=fetch_failures,
            failure_observed=state.failure_observed or has_failure,
        )
        return result, next_state

    def _all_done(self, run_ids, last_status, unreachable) -> bool:
        for run_id in run_ids:
            if run_id in unreachable:
                if self._unreachable_policy is UnreachableRunPolicy.BLOCK:
                    return False
                continue
            if last_status.get(run_id) != COMPLETED:
                return False
        return True
