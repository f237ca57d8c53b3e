"""Commit, branch, repository and pull request context for a ci-wait invocation."""

import dataclasses
from dataclasses import dataclass
from typing import Optional

import click

from ci_wait.console import print_info, print_warn
from ci_wait.errors import ContextUnavailable, ExternalToolFailure, UnpushedCommits


@dataclass(frozen=True)
class Context:
    commit: str
    short_commit: str
    branch: str
    repo: str
    commit_url: str
    pr_number: Optional[int] = None
    pr_url: Optional[str] = None

    def with_pull_request(self, number, url) -> "Context":
        return dataclasses.replace(self, pr_number=number, pr_url=url)


def commit_url(repo: str, commit: str) -> str:
    return f"https://github.com/{repo}/commit/{commit}"


class ContextResolver:
    """Checks the working copy preconditions and builds a Context.

    Args:
        git_repo: GitRepository (or FakeGitRepository).
        gh_client: GitHubClient (or FakeGitHubClient).
    """

    def __init__(self, git_repo, gh_client):
        self._git_repo = git_repo
        self._gh_client = gh_client

    def resolve(self) -> Context:
        self.check_pushed()

        commit = self._git_repo.head_sha
        short_commit = self._git_repo.short_sha
        branch = self._git_repo.branch

        try:
            repo = self._gh_client.get_repo_name_with_owner()
        except (ExternalToolFailure, KeyError, TypeError) as e:
            raise ContextUnavailable("determine GitHub repository", e) from e

        return Context(
            commit=commit,
            short_commit=short_commit,
            branch=branch,
            repo=repo,
            commit_url=commit_url(repo, commit),
        )

    def check_pushed(self) -> None:
        unpushed = self._git_repo.unpushed_commits()
        if unpushed:
            print_warn("Unpushed commits detected:")
            for line in unpushed:
                click.echo(line)
            raise UnpushedCommits(unpushed)

    def attach_pull_request(self, context: Context) -> Context:
        """Best effort: a missing or unreadable PR leaves the context unchanged."""
        pr_info = self._gh_client.get_pr_info()
        if not pr_info:
            return context
        return context.with_pull_request(pr_info.get("number"), pr_info.get("url"))


def print_context(context: Context) -> None:
    print_info(f"Repository: {context.repo}")
    print_info(f"Branch: {context.branch}")
    print_info(f"Commit: {context.short_commit}")
    click.echo()
