"""Point-in-time snapshots of workflow runs and their jobs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ci_wait.errors import ExternalToolFailure, RunDetailUnavailable

COMPLETED = "completed"
IN_PROGRESS = "in_progress"
PENDING_STATUSES = ("queued", "waiting")
PASSING_CONCLUSIONS = ("success", "skipped")


class JobDisplay(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    OTHER = "other"


@dataclass(frozen=True)
class JobSnapshot:
    job_id: int
    name: str
    status: str
    conclusion: str = ""

    @classmethod
    def from_json(cls, data) -> "JobSnapshot":
        return cls(
            job_id=data.get("databaseId"),
            name=data.get("name", ""),
            status=data.get("status", ""),
            conclusion=data.get("conclusion") or "",
        )

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_failure(self) -> bool:
        return self.is_completed and self.conclusion not in PASSING_CONCLUSIONS

    @property
    def display_state(self) -> JobDisplay:
        if self.is_completed:
            if self.conclusion == "success":
                return JobDisplay.SUCCESS
            if self.conclusion == "skipped":
                return JobDisplay.SKIPPED
            return JobDisplay.FAILED
        if self.status == IN_PROGRESS:
            return JobDisplay.IN_PROGRESS
        if self.status in PENDING_STATUSES:
            return JobDisplay.PENDING
        return JobDisplay.OTHER


@dataclass(frozen=True)
class RunSnapshot:
    run_id: int
    name: str
    status: str
    conclusion: str = ""
    url: str = ""
    jobs: Tuple[JobSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, run_id, data) -> "RunSnapshot":
        return cls(
            run_id=run_id,
            name=data.get("name", ""),
            status=data.get("status", ""),
            conclusion=data.get("conclusion") or "",
            url=data.get("url", ""),
            jobs=tuple(JobSnapshot.from_json(job) for job in data.get("jobs") or []),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def conclusion_if_completed(self) -> Optional[str]:
        """The run's conclusion, or None while the run is still going."""
        return self.conclusion if self.is_completed else None

    @property
    def succeeded(self) -> bool:
        return self.conclusion_if_completed == "success"


@dataclass(frozen=True)
class DiscoveredRun:
    run_id: int
    name: str = ""


def state_fingerprint(snapshots):
    """Ordered (run id, job name, status, conclusion) for every job of every run."""
    return tuple(
        (snapshot.run_id, job.name, job.status, job.conclusion)
        for snapshot in snapshots
        for job in snapshot.jobs
    )


def completion_percent(completed: int, total: int) -> int:
    if total == 0:
        return 0
    return completed * 100 // total


class RunSnapshotFetcher:
    """Fetches RunSnapshots through a GitHubClient."""

    def __init__(self, gh_client):
        self._gh_client = gh_client

    def fetch(self, run_id: int) -> RunSnapshot:
        try:
            data = self._gh_client.get_run_detail(run_id)
        except ExternalToolFailure as e:
            raise RunDetailUnavailable(run_id, e) from e
        if not isinstance(data, dict):
            raise RunDetailUnavailable(run_id, f"unexpected run detail: {data!r}")
        jobs = data.get("jobs") or []
        if not isinstance(jobs, list) or not all(isinstance(job, dict) for job in jobs):
            raise RunDetailUnavailable(run_id, f"unexpected jobs: {jobs!r}")
        return RunSnapshot.from_json(run_id, data)
