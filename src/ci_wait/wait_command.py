"""CiWaitCommand sequences context, discovery, polling and reporting."""

import time

from ci_wait.console import TerminalRenderTarget, print_warn
from ci_wait.context import ContextResolver, print_context
from ci_wait.git_repository import GitRepository
from ci_wait.poll_loop import PollLoop, UnreachableRunPolicy
from ci_wait.result_reporter import ResultReporter
from ci_wait.run_discovery import RunDiscovery


class CiWaitCommand:
    """Waits for the CI runs of the current commit and returns the process exit code.

    Fatal errors (CiWaitError subclasses) propagate to the caller.
    """

    def __init__(
        self,
        opts,
        gh_client,
        open_repo=GitRepository.open,
        render_target=None,
        sleep=time.sleep,
    ):
        self.opts = opts
        self.gh_client = gh_client
        self.open_repo = open_repo
        self.render_target = render_target or TerminalRenderTarget()
        self.sleep = sleep

    def execute(self) -> int:
        self.opts.validate()

        git_repo = self.open_repo()
        resolver = ContextResolver(git_repo, self.gh_client)
        context = resolver.resolve()
        print_context(context)
        context = resolver.attach_pull_request(context)

        discovery = RunDiscovery(
            self.gh_client,
            attempts=self.opts.discovery_attempts,
            interval=self.opts.discovery_interval,
            sleep=self.sleep,
        )
        run_ids = [run.run_id for run in discovery.discover(context, self.opts.run_id)]

        poll_loop = PollLoop(
            self.gh_client,
            self.render_target,
            poll_interval=self.opts.poll_interval,
            unreachable_policy=self.opts.unreachable_policy,
            unreachable_after=self.opts.unreachable_after,
            sleep=self.sleep,
        )
        outcome = poll_loop.poll(run_ids, fail_fast=self.opts.fail_fast)

        reporter = ResultReporter(self.gh_client)

        if self.opts.fail_fast and outcome.any_failure:
            reporter.report(run_ids, context)
            return 1

        all_success = reporter.report(run_ids, context)

        if outcome.unreachable:
            ids = ", ".join(str(run_id) for run_id in outcome.unreachable)
            print_warn(f"Could not observe run(s): {ids}")
            if self.opts.unreachable_policy is UnreachableRunPolicy.FAIL:
                return 1

        return 0 if all_success else 1
