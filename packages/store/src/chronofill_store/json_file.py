"""JsonStore: the ledger as a single JSON array on disk.

The whole file is rewritten on every change, through a temporary file and
os.replace() so an interrupted write never leaves a truncated ledger. A run
produces at most a few thousand entries, so reading it back in full is cheap.

An unreadable ledger raises CorruptLedgerError instead of being treated as
empty; saving over it would drop every earlier entry.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict
from pathlib import Path

from chronofill_store.base import BaseStore
from chronofill_store.errors import CorruptLedgerError
from chronofill_store.models import PullRequestEntry

logger = logging.getLogger(__name__)

DEFAULT_PATH = ".chronofill-ledger.json"


class JsonStore(BaseStore):
    def __init__(self, path: str = DEFAULT_PATH):
        self._path = Path(path)

    def _read(self) -> list[dict]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text() or "[]")
        except json.JSONDecodeError as e:
            raise CorruptLedgerError(self._path, str(e)) from e
        if not isinstance(data, list):
            raise CorruptLedgerError(self._path, f"expected a JSON array, got {type(data).__name__}")
        return data

    def _write(self, rows: list[dict]) -> None:
        directory = self._path.parent
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(json.dumps(rows, indent=2) + "\n")
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote %d ledger entries to %s", len(rows), self._path)

    def save(self, entry: PullRequestEntry) -> None:
        rows = self._read()
        rows.append(asdict(entry))
        self._write(rows)

    def mark_merged(self, repo: str, pr_number: int, merged_at: str) -> None:
        rows = self._read()
        for row in rows:
            if row.get("repo") == repo and row.get("pr_number") == pr_number:
                row["merged_at"] = merged_at
        self._write(rows)

    def list_entries(self, repo: str, pending_only: bool = False) -> list[PullRequestEntry]:
        entries = [self._from_dict(r) for r in self._read() if r.get("repo") == repo]
        if pending_only:
            entries = [e for e in entries if e.pending]
        return entries

    @staticmethod
    def _from_dict(d: dict) -> PullRequestEntry:
        return PullRequestEntry(
            repo=d.get("repo", ""),
            branch=d.get("branch", ""),
            pr_number=d.get("pr_number", 0),
            pr_url=d.get("pr_url", ""),
            committed_at=d.get("committed_at", ""),
            created_at=d.get("created_at", ""),
            merged_at=d.get("merged_at"),
        )
