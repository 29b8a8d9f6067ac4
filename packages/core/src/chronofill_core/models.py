"""Value types passed between the scheduler, the factory and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class DayPlan:
    """How many synthetic events one calendar day receives."""

    date: date
    day_index: int
    commit_count: int


@dataclass(frozen=True)
class CommitEvent:
    timestamp: datetime  # timezone-aware, second resolution
    sequence: int  # 1-based position within the day
    day_index: int

    @property
    def label(self) -> str:
        return self.timestamp.strftime("%Y-%m-%d %H:%M:%S")

    @property
    def iso(self) -> str:
        return self.timestamp.isoformat()


@dataclass(frozen=True)
class PullRequestRecord:
    """A pull request opened for one synthetic commit.

    Returned by BranchPROrchestrator.commit_and_open_pr() and consumed, in
    creation order, by the merge pass. The CLI maps it to a store entry.
    """

    branch: str
    pr_number: int
    pr_url: str
    committed_at: datetime


@dataclass
class RunSummary:
    days: int = 0
    commits: int = 0
    pushed: bool = False
    pull_requests: list[PullRequestRecord] = field(default_factory=list)
    merged: list[PullRequestRecord] = field(default_factory=list)
