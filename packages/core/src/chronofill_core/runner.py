"""Top-level drive loop: days, then events within each day, strictly in order."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from datetime import date
from typing import Callable, Optional

from chronofill_core.commits import CommitFactory
from chronofill_core.dates import walk_days
from chronofill_core.git import GitRepo
from chronofill_core.models import CommitEvent, DayPlan, PullRequestRecord, RunSummary
from chronofill_core.orchestrator import BranchPROrchestrator
from chronofill_core.scheduler import RandomScheduler

logger = logging.getLogger(__name__)


class RunController:
    """Walks the date range and feeds every planned event to a factory or orchestrator.

    Events run one after another on a single working tree; nothing here is
    concurrent. Any exception aborts the run and leaves its effects in place.
    """

    def __init__(
        self,
        scheduler: RandomScheduler,
        start: date,
        end: date,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.scheduler = scheduler
        self.start = start
        self.end = end
        self._sleep = sleep if sleep is not None else time.sleep

    def plan(self) -> Iterator[tuple[DayPlan, list[CommitEvent]]]:
        for index, day in enumerate(walk_days(self.start, self.end)):
            day_plan = self.scheduler.plan_day(day, index)
            yield day_plan, self.scheduler.events(day_plan)

    def run_commits(self, factory: CommitFactory, git: GitRepo, push: bool = True) -> RunSummary:
        summary = RunSummary()
        for day_plan, events in self.plan():
            summary.days += 1
            logger.info("%s: %d commit(s)", day_plan.date.isoformat(), day_plan.commit_count)
            for event in events:
                factory.commit(event.timestamp, f"Commit on {event.iso}")
                summary.commits += 1

        if push:
            git.push()
            summary.pushed = True
        return summary

    def run_pull_requests(
        self,
        orchestrator: BranchPROrchestrator,
        on_created: Optional[Callable[[PullRequestRecord], None]] = None,
        on_merged: Optional[Callable[[PullRequestRecord], None]] = None,
        merge: bool = True,
    ) -> RunSummary:
        summary = RunSummary()
        for day_plan, events in self.plan():
            summary.days += 1
            logger.info("%s: %d commit/PR pair(s)", day_plan.date.isoformat(), day_plan.commit_count)
            for event in events:
                if summary.pull_requests:
                    # Throttle between consecutive remote calls.
                    self._sleep(self.scheduler.delay_ms() / 1000)
                record = orchestrator.commit_and_open_pr(event)
                summary.commits += 1
                summary.pull_requests.append(record)
                if on_created is not None:
                    on_created(record)

        if merge and summary.pull_requests:
            logger.info("Created %d PR(s), now merging them...", len(summary.pull_requests))
            summary.merged = orchestrator.merge_all(summary.pull_requests, on_merged=on_merged)
            logger.info("All PRs have been merged.")
        return summary
