"""One branch, one commit, one pull request per synthetic event.

Each event walks the states below, re-syncing the base branch first so every
branch forks from the current tip, even after earlier PRs have merged:

  BASE_SYNCED -> BRANCHED -> COMMITTED -> PUSHED -> PR_CREATED

Merging is a separate pass over the collected records (merge_all) so that
all PRs exist before any of them changes the base branch.
"""

from __future__ import annotations

import enum
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional

from chronofill_core.commits import CommitFactory
from chronofill_core.errors import MergeError, RemoteAPIError
from chronofill_core.gh.pull_request import merge_pull, open_pull
from chronofill_core.git import GitRepo
from chronofill_core.models import CommitEvent, PullRequestRecord

logger = logging.getLogger(__name__)

# Suffix range for branch names; timestamp + suffix is unique in practice.
_BRANCH_SUFFIX_LIMIT = 1_000_000


class EventState(enum.Enum):
    BASE_SYNCED = "base_synced"
    BRANCHED = "branched"
    COMMITTED = "committed"
    PUSHED = "pushed"
    PR_CREATED = "pr_created"


class BranchPROrchestrator:
    """Drives the per-event state chain and the merge pass.

    ``factory`` may be None when only merge_all() is needed, as when
    resuming merges from the ledger.
    """

    def __init__(
        self,
        git: GitRepo,
        factory: Optional[CommitFactory],
        repo,
        base_branch: str = "main",
        remote: str = "origin",
        merge_method: str = "merge",
        rng: Optional[random.Random] = None,
    ):
        self._git = git
        self._factory = factory
        self._repo = repo  # PyGithub Repository
        self.base_branch = base_branch
        self.remote = remote
        self.merge_method = merge_method
        self._rng = rng if rng is not None else random.Random()

    def branch_name(self, timestamp: datetime) -> str:
        stamp = timestamp.astimezone(timezone.utc).strftime("%Y%m%d-%H%M%S")
        return f"commit-{stamp}-{self._rng.randrange(_BRANCH_SUFFIX_LIMIT)}"

    def sync_base(self) -> None:
        self._git.fetch()
        self._git.checkout(self.base_branch)
        self._git.pull(self.remote, self.base_branch)

    def _advance(self, branch: str, state: EventState) -> None:
        logger.debug("%s: %s", branch, state.name)

    def commit_and_open_pr(self, event: CommitEvent) -> PullRequestRecord:
        """Run one event through every state and return the opened PR.

        A failure in any step propagates; branches and PRs created by
        earlier events are left in place.
        """
        if self._factory is None:
            raise ValueError("commit_and_open_pr() needs a CommitFactory; this orchestrator is merge-only.")
        iso = event.iso
        branch = self.branch_name(event.timestamp)

        self.sync_base()
        self._advance(branch, EventState.BASE_SYNCED)

        self._git.checkout_new_branch(branch, self.base_branch)
        self._advance(branch, EventState.BRANCHED)

        self._factory.commit(event.timestamp, f"chore: commit on {iso}", sequence=event.sequence)
        self._advance(branch, EventState.COMMITTED)

        self._git.push(self.remote, branch)
        self._advance(branch, EventState.PUSHED)

        number, url = open_pull(
            self._repo,
            title=f"chore: PR for commit {event.label}",
            body=f"This PR corresponds to a single automated commit on {iso}.",
            head=branch,
            base=self.base_branch,
        )
        self._advance(branch, EventState.PR_CREATED)
        logger.info("Opened PR #%d for %s", number, event.label)

        return PullRequestRecord(branch=branch, pr_number=number, pr_url=url, committed_at=event.timestamp)

    def merge_all(
        self,
        records: list[PullRequestRecord],
        on_merged: Optional[Callable[[PullRequestRecord], None]] = None,
    ) -> list[PullRequestRecord]:
        """Merge ``records`` one at a time, in the order given.

        The first failure stops the pass and raises MergeError, whose
        ``merged`` attribute holds the records merged before it.
        """
        merged: list[PullRequestRecord] = []
        for record in records:
            logger.info("Merging PR #%d...", record.pr_number)
            try:
                merge_pull(self._repo, record.pr_number, self.merge_method)
            except RemoteAPIError as e:
                raise MergeError(record, merged, str(e)) from e
            merged.append(record)
            logger.info("PR #%d merged successfully.", record.pr_number)
            if on_merged is not None:
                on_merged(record)
        return merged
