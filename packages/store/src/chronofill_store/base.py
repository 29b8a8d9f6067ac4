"""Abstract ledger interface.

The CLI depends on BaseStore, not on a concrete backend, so the JSON file
and SQLite ledgers are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronofill_store.models import PullRequestEntry


class BaseStore(ABC):
    """Pluggable record of the pull requests a run has opened.

    Entries are kept in creation order; that is the order the merge pass
    has to follow when it resumes from the ledger.
    """

    @abstractmethod
    def save(self, entry: PullRequestEntry) -> None:
        """Append one entry."""

    @abstractmethod
    def mark_merged(self, repo: str, pr_number: int, merged_at: str) -> None:
        """Stamp an existing entry as merged. Unknown PRs are ignored."""

    @abstractmethod
    def list_entries(self, repo: str, pending_only: bool = False) -> list[PullRequestEntry]:
        """Return entries for a repo in creation order, optionally only unmerged ones.

        Returns an empty list if nothing was recorded. Raises StoreError if the
        ledger exists but cannot be read.
        """

    def close(self) -> None:
        """Release any resources held by the store. Default is a no-op."""
