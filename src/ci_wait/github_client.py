"""GitHubClient: wraps the `gh` CLI calls used to observe workflow runs."""

import json
import subprocess
from typing import Any, Dict, List, Optional

from ci_wait.errors import ExternalToolFailure

RUN_LIST_FIELDS = "databaseId,status,conclusion,name"
RUN_DETAIL_FIELDS = "status,conclusion,name,jobs,url"


class GitHubClient:
    """Wraps GitHub CLI (gh) calls for run and pull request queries.

    All subprocess calls go through _run_gh() for consistency.
    """

    def _run_gh(self, args, **kwargs):
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            **kwargs,
        )

    def _gh_json(self, args):
        try:
            result = self._run_gh(args)
        except OSError as e:
            raise ExternalToolFailure(args, None, str(e)) from e
        if result.returncode != 0:
            raise ExternalToolFailure(args, result.returncode, result.stderr)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ExternalToolFailure(args, result.returncode, f"invalid JSON: {e}") from e

    def get_repo_name_with_owner(self) -> str:
        data = self._gh_json(["gh", "repo", "view", "--json", "nameWithOwner"])
        return data["nameWithOwner"]

    def get_pr_info(self) -> Optional[Dict[str, Any]]:
        """Return {"number", "url"} for the current branch's PR, or None."""
        try:
            data = self._gh_json(["gh", "pr", "view", "--json", "number,url"])
        except ExternalToolFailure:
            return None
        if not isinstance(data, dict) or "number" not in data:
            return None
        return data

    def list_runs_for_commit(self, sha: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self._gh_json(
            ["gh", "run", "list", "--commit", sha,
             "--json", RUN_LIST_FIELDS, "--limit", str(limit)]
        )

    def get_run_detail(self, run_id: int) -> Dict[str, Any]:
        return self._gh_json(
            ["gh", "run", "view", str(run_id), "--json", RUN_DETAIL_FIELDS]
        )
