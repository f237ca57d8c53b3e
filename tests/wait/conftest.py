"""Shared fixtures for ci-wait tests."""

import os
import sys
import tempfile

import pytest
from git import Repo

# Ensure tests/wait/ is on sys.path so test files can import the fakes
# unambiguously (avoids conftest module name collisions).
sys.path.insert(0, os.path.dirname(__file__))

from fake_git_repository import FakeGitRepository  # noqa: E402
from fake_github_client import FakeGitHubClient  # noqa: E402
from recording_render_target import RecordingRenderTarget  # noqa: E402


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def fake_gh():
    return FakeGitHubClient()


@pytest.fixture
def fake_git_repo():
    return FakeGitRepository()


@pytest.fixture
def render_target():
    return RecordingRenderTarget()


@pytest.fixture
def sleeps():
    return SleepRecorder()


def _configure_user(repo):
    repo.config_writer().set_value("user", "email", "test@test.com").release()
    repo.config_writer().set_value("user", "name", "Test").release()


def _commit_file(tmpdir, repo, name, content, message):
    with open(os.path.join(tmpdir, name), "w") as f:
        f.write(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def test_git_repo():
    """Create a temporary git repository with no commits."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo = Repo.init(tmpdir)
        _configure_user(repo)
        yield tmpdir, repo


@pytest.fixture
def test_git_repo_with_commit():
    """Create a temporary git repository with an initial commit."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo = Repo.init(tmpdir)
        _configure_user(repo)
        _commit_file(tmpdir, repo, "README.md", "# Test Repo", "Initial commit")
        yield tmpdir, repo


@pytest.fixture
def test_git_repo_with_upstream():
    """Create a clone whose current branch tracks a bare origin."""
    with tempfile.TemporaryDirectory() as tmpdir:
        origin_dir = os.path.join(tmpdir, "origin.git")
        work_dir = os.path.join(tmpdir, "work")
        Repo.init(origin_dir, bare=True)
        repo = Repo.init(work_dir)
        _configure_user(repo)
        _commit_file(work_dir, repo, "README.md", "# Test Repo", "Initial commit")
        repo.create_remote("origin", origin_dir)
        branch = repo.active_branch.name
        repo.git.push("-u", "origin", branch)
        yield work_dir, repo


def commit_file(tmpdir, repo, name, content="content", message="commit"):
    return _commit_file(tmpdir, repo, name, content, message)
