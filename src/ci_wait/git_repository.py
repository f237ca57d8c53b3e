"""GitRepository: wraps GitPython Repo for the commit and upstream queries ci-wait needs.

Provides an injectable interface for Git operations, enabling
FakeGitRepository in tests without unittest.mock.patch.
"""

from typing import List, Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ci_wait.errors import ContextUnavailable, NotARepository


class GitRepository:
    """Read-only view of the working copy ci-wait is invoked from.

    Args:
        repo: A GitPython Repo instance.
    """

    def __init__(self, repo):
        self._repo = repo

    @classmethod
    def open(cls, path=".") -> "GitRepository":
        try:
            repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepository() from e
        return cls(repo)

    def unpushed_commits(self) -> Optional[List[str]]:
        """Return one-line summaries of commits not on the upstream branch.

        Returns None when no upstream is configured, since there is nothing
        to compare against.
        """
        try:
            output = self._repo.git.log("@{u}..HEAD", "--oneline")
        except GitCommandError:
            return None
        return [line for line in output.splitlines() if line.strip()]

    @property
    def head_sha(self) -> str:
        try:
            return self._repo.head.commit.hexsha
        except ValueError as e:
            raise ContextUnavailable("get commit", e) from e

    @property
    def short_sha(self) -> str:
        try:
            return self._repo.git.rev_parse("--short", "HEAD")
        except GitCommandError as e:
            raise ContextUnavailable("get short commit", e) from e

    @property
    def branch(self) -> str:
        """Current branch name, or an empty string on a detached HEAD."""
        try:
            return self._repo.git.branch("--show-current")
        except GitCommandError as e:
            raise ContextUnavailable("get branch", e) from e
