"""Pull-request ledger data models.

Decoupled from chronofill_core so the store layer can be used independently
and chronofill_core has no knowledge of persistence concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class PullRequestEntry:
    """One pull request opened by a `chronofill prs` run.

    The CLI maps each core PullRequestRecord to an entry right after the PR
    is created, and stamps ``merged_at`` once the merge pass gets to it.
    """

    repo: str  # owner/name
    branch: str
    pr_number: int
    pr_url: str
    committed_at: str  # ISO-8601, offset of the synthetic commit
    created_at: str  # ISO-8601 UTC
    merged_at: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.merged_at is None
