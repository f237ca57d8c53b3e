"""ResultReporter: final pass/fail report with remediation commands."""

import click

from ci_wait.console import print_error, print_failure, print_info, print_success, print_warn
from ci_wait.errors import RunDetailUnavailable
from ci_wait.snapshots import RunSnapshotFetcher

BANNER = "═" * 64

JOB_ICONS = {
    "success": "✅",
    "failure": "❌",
    "skipped": "⏭️ ",
}
DEFAULT_JOB_ICON = "⏳"


def job_log_command(job_id) -> str:
    return f"gh run view --log --job {job_id}"


def failed_logs_command(run_id) -> str:
    return f"gh run view {run_id} --log-failed"


class ResultReporter:
    """Prints the final state of every monitored run.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient).
    """

    def __init__(self, gh_client):
        self._fetcher = RunSnapshotFetcher(gh_client)

    def report(self, run_ids, context) -> bool:
        """Report each run, then the commit and PR links.

        Returns True iff every run that could be fetched concluded with success.
        """
        all_success = True

        for run_id in run_ids:
            try:
                snapshot = self._fetcher.fetch(run_id)
            except RunDetailUnavailable:
                print_error(f"Could not get run details for {run_id}")
                continue
            if not self._report_run(snapshot):
                all_success = False

        print_info("Links:")
        click.echo(f"  Commit:  {context.commit_url}")
        if context.pr_url:
            click.echo(f"      PR:  {context.pr_url}")
        click.echo()

        return all_success

    def _report_run(self, snapshot) -> bool:
        click.echo(BANNER)
        if snapshot.succeeded:
            print_success(f"✅ {snapshot.name} PASSED")
        else:
            print_failure(f"❌ {snapshot.name} FAILED")
        click.echo(BANNER)
        click.echo()

        print_info("Jobs:")
        for job in snapshot.jobs:
            icon = JOB_ICONS.get(job.conclusion, DEFAULT_JOB_ICON)
            if job.conclusion == "failure":
                click.echo(f"  {icon} {job.name}  →  {job_log_command(job.job_id)}")
            else:
                click.echo(f"  {icon} {job.name}")
        click.echo()

        click.echo(f"     Run:  {snapshot.url}")

        if not snapshot.succeeded:
            click.echo()
            print_warn("View all failed logs:")
            click.echo(f"  {failed_logs_command(snapshot.run_id)}")
            click.echo()

        return snapshot.succeeded
