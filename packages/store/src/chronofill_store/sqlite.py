"""SQLiteStore: local file-based ledger.

Schema:
  pull_requests  one row per opened PR; ``id`` preserves creation order.
"""

from __future__ import annotations

import logging
import sqlite3

from chronofill_store.base import BaseStore
from chronofill_store.models import PullRequestEntry

logger = logging.getLogger(__name__)

DEFAULT_PATH = ".chronofill.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pull_requests (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    repo          TEXT NOT NULL,
    branch        TEXT NOT NULL,
    pr_number     INTEGER NOT NULL,
    pr_url        TEXT,
    committed_at  TEXT,
    created_at    TEXT,
    merged_at     TEXT
);
CREATE INDEX IF NOT EXISTS idx_pull_requests_repo ON pull_requests (repo);
CREATE INDEX IF NOT EXISTS idx_pull_requests_pr   ON pull_requests (repo, pr_number);
"""


class SQLiteStore(BaseStore):
    """Ledger in a SQLite database file (``store_path``, default `.chronofill.db`)."""

    def __init__(self, db_path: str = DEFAULT_PATH):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(self, entry: PullRequestEntry) -> None:
        self._conn.execute(
            """
            INSERT INTO pull_requests
              (repo, branch, pr_number, pr_url, committed_at, created_at, merged_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.repo,
                entry.branch,
                entry.pr_number,
                entry.pr_url,
                entry.committed_at,
                entry.created_at,
                entry.merged_at,
            ),
        )
        self._conn.commit()

    def mark_merged(self, repo: str, pr_number: int, merged_at: str) -> None:
        cur = self._conn.execute(
            "UPDATE pull_requests SET merged_at=? WHERE repo=? AND pr_number=?",
            (merged_at, repo, pr_number),
        )
        if cur.rowcount == 0:
            logger.debug("No ledger entry for %s#%d", repo, pr_number)
        self._conn.commit()

    def list_entries(self, repo: str, pending_only: bool = False) -> list[PullRequestEntry]:
        query = "SELECT * FROM pull_requests WHERE repo=?"
        if pending_only:
            query += " AND merged_at IS NULL"
        rows = self._conn.execute(query + " ORDER BY id", (repo,)).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> PullRequestEntry:
        return PullRequestEntry(
            repo=row["repo"],
            branch=row["branch"],
            pr_number=row["pr_number"],
            pr_url=row["pr_url"] or "",
            committed_at=row["committed_at"] or "",
            created_at=row["created_at"] or "",
            merged_at=row["merged_at"],
        )
