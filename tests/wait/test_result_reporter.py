"""Tests for ResultReporter."""

import pytest

from ci_wait.context import Context
from ci_wait.result_reporter import ResultReporter

from fake_github_client import gh_failure, job, run_detail


def _context(pr_url=None):
    return Context(
        commit="abc123def",
        short_commit="abc123d",
        branch="main",
        repo="owner/repo",
        commit_url="https://github.com/owner/repo/commit/abc123def",
        pr_number=5 if pr_url else None,
        pr_url=pr_url,
    )


@pytest.mark.unit
class TestReportPassing:

    def test_single_successful_run(self, fake_gh, capsys):
        fake_gh.set_run_detail(1, run_detail(name="CI", jobs=[job(10, "build")]))

        assert ResultReporter(fake_gh).report([1], _context()) is True

        out = capsys.readouterr().out
        assert "✅ CI PASSED" in out
        assert "  ✅ build" in out
        assert "--log-failed" not in out
        assert "     Run:  https://github.com/owner/repo/actions/runs/1" in out

    def test_links_include_commit_and_pr(self, fake_gh, capsys):
        fake_gh.set_run_detail(1, run_detail())
        ResultReporter(fake_gh).report([1], _context(pr_url="https://github.com/owner/repo/pull/5"))
        out = capsys.readouterr().out
        assert "  Commit:  https://github.com/owner/repo/commit/abc123def" in out
        assert "      PR:  https://github.com/owner/repo/pull/5" in out

    def test_pr_link_omitted_without_pr(self, fake_gh, capsys):
        fake_gh.set_run_detail(1, run_detail())
        ResultReporter(fake_gh).report([1], _context())
        assert "PR:" not in capsys.readouterr().out


@pytest.mark.unit
class TestReportFailing:

    def test_failed_run_lists_remediation_commands(self, fake_gh, capsys):
        fake_gh.set_run_detail(42, run_detail("completed", "failure", name="CI", jobs=[
            job(101, "build"),
            job(102, "test", "completed", "failure"),
        ]))

        assert ResultReporter(fake_gh).report([42], _context()) is False

        out = capsys.readouterr().out
        assert "❌ CI FAILED" in out
        assert "  ✅ build\n" in out
        assert "  ❌ test  →  gh run view --log --job 102" in out
        assert "View all failed logs:" in out
        assert "  gh run view 42 --log-failed" in out

    @pytest.mark.parametrize("conclusion,icon", [
        ("skipped", "⏭️ "),
        ("cancelled", "⏳"),
        ("", "⏳"),
    ])
    def test_job_icons(self, fake_gh, capsys, conclusion, icon):
        fake_gh.set_run_detail(1, run_detail(jobs=[job(1, "deploy", "completed", conclusion)]))
        ResultReporter(fake_gh).report([1], _context())
        assert f"  {icon} deploy\n" in capsys.readouterr().out

    def test_incomplete_run_is_not_a_pass(self, fake_gh):
        fake_gh.set_run_detail(1, run_detail("in_progress", "success"))
        assert ResultReporter(fake_gh).report([1], _context()) is False

    def test_any_failed_run_fails_overall(self, fake_gh):
        fake_gh.set_run_detail(1, run_detail())
        fake_gh.set_run_detail(2, run_detail("completed", "failure"))
        assert ResultReporter(fake_gh).report([1, 2], _context()) is False


@pytest.mark.unit
class TestReportFetchFailure:

    def test_malformed_run_is_skipped_with_error(self, fake_gh, capsys):
        fake_gh.set_run_detail(1, {"status": "completed", "conclusion": "success", "jobs": [42]})

        assert ResultReporter(fake_gh).report([1], _context()) is True
        assert "ERROR: Could not get run details for 1" in capsys.readouterr().err

    def test_unfetchable_run_is_skipped_with_error(self, fake_gh, capsys):
        fake_gh.set_run_detail(1, gh_failure())
        fake_gh.set_run_detail(2, run_detail(name="Lint"))

        assert ResultReporter(fake_gh).report([1, 2], _context()) is True

        captured = capsys.readouterr()
        assert "ERROR: Could not get run details for 1" in captured.err
        assert "✅ Lint PASSED" in captured.out
        assert "Links:" in captured.out
