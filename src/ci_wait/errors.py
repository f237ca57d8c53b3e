"""Error taxonomy for ci-wait.

Precondition and discovery errors are fatal and reported once at the CLI
boundary. RunDetailUnavailable is recovered locally by the poll loop and
the result reporter.
"""


class CiWaitError(RuntimeError):
    """Base class for all classified ci-wait failures."""


class NotARepository(CiWaitError):
    def __init__(self):
        super().__init__("not in a git repository")


class UnpushedCommits(CiWaitError):
    """Local commits exist that the upstream branch does not have."""

    def __init__(self, commits):
        self.commits = list(commits)
        super().__init__("push your changes first before waiting for CI")


class ContextUnavailable(CiWaitError):
    """Commit, branch or repository identity could not be resolved."""

    def __init__(self, what, cause=None):
        self.what = what
        self.cause = cause
        message = f"could not {what}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class InvalidRunID(CiWaitError, ValueError):
    def __init__(self, run_id):
        self.run_id = run_id
        super().__init__(f"invalid run ID: {run_id}")


class NoRunsFound(CiWaitError):
    def __init__(self, short_commit):
        self.short_commit = short_commit
        super().__init__(f"no workflow runs found for commit {short_commit}")


class ExternalToolFailure(CiWaitError):
    """A `gh` invocation could not start, exited non-zero or produced unparsable output.

    returncode is None when the process never ran.
    """

    def __init__(self, command, returncode, stderr):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr or ""
        outcome = "could not run" if returncode is None else f"failed (exit {returncode})"
        super().__init__(
            f"{' '.join(self.command)} {outcome}: {self.stderr.strip()}"
        )


class RunDetailUnavailable(CiWaitError):
    """Snapshot of a single run could not be fetched. Never fatal."""

    def __init__(self, run_id, cause=None):
        self.run_id = run_id
        self.cause = cause
        super().__init__(f"could not get run details for {run_id}")
