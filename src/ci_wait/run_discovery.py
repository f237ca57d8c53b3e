"""RunDiscovery: finds the workflow runs to watch for a commit."""

import re
import time
from typing import List, Optional

import click

from ci_wait.console import print_info, print_warn
from ci_wait.errors import ExternalToolFailure, InvalidRunID, NoRunsFound
from ci_wait.snapshots import DiscoveredRun

DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL = 5
RUN_LIST_LIMIT = 10
RUN_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_run_id(run_id) -> int:
    """Parse a run id the way the gh CLI prints them: optional sign, ASCII digits only."""
    if not RUN_ID_PATTERN.fullmatch(str(run_id)):
        raise InvalidRunID(run_id)
    return int(run_id)


class RunDiscovery:
    """Resolves the run ids to monitor, retrying while CI has not registered a run yet.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient).
        attempts: Number of run-list queries before giving up.
        interval: Seconds to sleep between attempts.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(self, gh_client, attempts=DEFAULT_ATTEMPTS,
                 interval=DEFAULT_INTERVAL, sleep=time.sleep):
        self._gh_client = gh_client
        self._attempts = attempts
        self._interval = interval
        self._sleep = sleep

    def discover(self, context, explicit_run_id: Optional[str] = None) -> List[DiscoveredRun]:
        if explicit_run_id is not None and explicit_run_id != "":
            run_id = parse_run_id(explicit_run_id)
            print_info(f"Watching specified run: {run_id}")
            return [DiscoveredRun(run_id=run_id)]

        print_info(f"Finding workflow runs for commit {context.short_commit}...")

        runs = []
        for attempt in range(1, self._attempts + 1):
            runs = self._query_runs(context.commit)
            if runs:
                break
            if attempt < self._attempts:
                print_warn(
                    f"No runs found yet, waiting {self._interval} seconds... "
                    f"(attempt {attempt}/{self._attempts})"
                )
                self._sleep(self._interval)

        if not runs:
            raise NoRunsFound(context.short_commit)

        print_info(f"Found {len(runs)} workflow run(s):")
        for run in runs:
            click.echo(f"  {run.run_id} {run.name}")
        click.echo()
        return runs

    def _query_runs(self, sha) -> List[DiscoveredRun]:
        """One run-list query. Errors and unparsable output count as "not found yet"."""
        try:
            data = self._gh_client.list_runs_for_commit(sha, limit=RUN_LIST_LIMIT)
        except ExternalToolFailure:
            return []
        if not isinstance(data, list):
            return []
        runs = []
        for item in data:
            if not isinstance(item, dict) or "databaseId" not in item:
                continue
            runs.append(DiscoveredRun(run_id=item["databaseId"], name=item.get("name", "")))
        return runs
