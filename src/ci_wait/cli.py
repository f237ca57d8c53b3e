"""Click entry point for ci-wait."""

import sys
from contextlib import contextmanager

import click

from ci_wait.console import print_error
from ci_wait.errors import CiWaitError
from ci_wait.github_client import GitHubClient
from ci_wait.poll_loop import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_UNREACHABLE_AFTER,
    UnreachableRunPolicy,
)
from ci_wait.wait_command import CiWaitCommand
from ci_wait.wait_opts import WaitOpts


@contextmanager
def with_error_handling():
    try:
        yield
    except CiWaitError as e:
        print_error(str(e))
        sys.exit(1)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("run_id", required=False)
@click.option("--keep-going", is_flag=True,
              help="Continue watching even after a job fails (default: exit on first failure)")
@click.option("--poll-interval", type=float, default=DEFAULT_POLL_INTERVAL, show_default=True,
              envvar="CI_WAIT_POLL_INTERVAL", help="Seconds between status polls")
@click.option("--unreachable-runs",
              type=click.Choice([p.value for p in UnreachableRunPolicy]),
              default=UnreachableRunPolicy.EXCLUDE.value, show_default=True,
              envvar="CI_WAIT_UNREACHABLE_RUNS",
              help="How to treat a run whose details repeatedly cannot be fetched")
@click.option("--unreachable-after", type=int, default=DEFAULT_UNREACHABLE_AFTER,
              show_default=True,
              help="Consecutive failed fetches before a run counts as unreachable")
def main(run_id, keep_going, poll_interval, unreachable_runs, unreachable_after):
    """Wait for GitHub Actions CI to complete and report results.

    If no RUN_ID is provided, waits for ALL runs for the current commit.

    By default, exits immediately when any job fails. Use --keep-going to
    wait for all jobs.
    """
    opts = WaitOpts(
        run_id=run_id,
        keep_going=keep_going,
        poll_interval=poll_interval,
        unreachable_runs=unreachable_runs,
        unreachable_after=unreachable_after,
    )
    with with_error_handling():
        exit_code = CiWaitCommand(opts, GitHubClient()).execute()
    sys.exit(exit_code)
