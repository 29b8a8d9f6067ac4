"""No-op store, the default when no ledger is configured."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chronofill_store.base import BaseStore

if TYPE_CHECKING:
    from chronofill_store.models import PullRequestEntry


class NoOpStore(BaseStore):
    """Discards every entry, so the CLI can always call save() unconditionally."""

    def save(self, entry: PullRequestEntry) -> None:
        pass

    def mark_merged(self, repo: str, pr_number: int, merged_at: str) -> None:
        pass

    def list_entries(self, repo: str, pending_only: bool = False) -> list[PullRequestEntry]:
        return []
