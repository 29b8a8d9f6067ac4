"""Tests for chronofill-store implementations."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone

import pytest

from chronofill_store.errors import CorruptLedgerError, StoreError
from chronofill_store.json_file import JsonStore
from chronofill_store.models import PullRequestEntry
from chronofill_store.noop import NoOpStore
from chronofill_store.sqlite import SQLiteStore


def _make_entry(repo="acme/widgets", pr_number=1, merged_at=None):
    return PullRequestEntry(
        repo=repo,
        branch=f"commit-20250927-130507-{pr_number}",
        pr_number=pr_number,
        pr_url=f"https://github.com/{repo}/pull/{pr_number}",
        committed_at="2025-09-27T13:05:07+00:00",
        created_at=datetime.now(timezone.utc).isoformat(),
        merged_at=merged_at,
    )


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_save_does_not_raise(self):
        NoOpStore().save(_make_entry())

    def test_list_entries_returns_empty(self):
        store = NoOpStore()
        store.save(_make_entry())
        store.mark_merged("acme/widgets", 1, "2025-10-01T00:00:00+00:00")
        assert store.list_entries("acme/widgets") == []


# ---------------------------------------------------------------------------
# Shared behaviour of the persistent backends
# ---------------------------------------------------------------------------


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path):
    if request.param == "json":
        s = JsonStore(path=str(tmp_path / "ledger.json"))
    else:
        s = SQLiteStore(db_path=str(tmp_path / "ledger.db"))
    yield s
    s.close()


class TestPersistentStores:
    def test_save_and_list(self, store):
        store.save(_make_entry())
        entries = store.list_entries("acme/widgets")
        assert len(entries) == 1
        assert entries[0].pr_number == 1
        assert entries[0].branch == "commit-20250927-130507-1"
        assert entries[0].pending

    def test_creation_order_preserved(self, store):
        for n in (5, 2, 9):
            store.save(_make_entry(pr_number=n))
        assert [e.pr_number for e in store.list_entries("acme/widgets")] == [5, 2, 9]

    def test_repos_isolated(self, store):
        store.save(_make_entry(repo="acme/widgets"))
        store.save(_make_entry(repo="acme/gadgets"))
        assert len(store.list_entries("acme/widgets")) == 1
        assert store.list_entries("other/repo") == []

    def test_mark_merged_and_pending_filter(self, store):
        for n in (1, 2, 3):
            store.save(_make_entry(pr_number=n))
        store.mark_merged("acme/widgets", 1, "2025-10-01T00:00:00+00:00")

        pending = store.list_entries("acme/widgets", pending_only=True)
        assert [e.pr_number for e in pending] == [2, 3]
        merged = store.list_entries("acme/widgets")[0]
        assert merged.merged_at == "2025-10-01T00:00:00+00:00"
        assert not merged.pending

    def test_mark_merged_unknown_pr_is_ignored(self, store):
        store.save(_make_entry(pr_number=1))
        store.mark_merged("acme/widgets", 99, "2025-10-01T00:00:00+00:00")
        assert store.list_entries("acme/widgets", pending_only=True)[0].pr_number == 1


# ---------------------------------------------------------------------------
# JsonStore specifics
# ---------------------------------------------------------------------------


class TestJsonStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonStore(path=str(tmp_path / "absent.json")).list_entries("acme/widgets") == []

    def test_file_is_json_array(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonStore(path=str(path)).save(_make_entry())
        data = json.loads(path.read_text())
        assert isinstance(data, list)
        assert data[0]["pr_number"] == 1
        assert data[0]["merged_at"] is None

    def test_truncated_ledger_is_not_overwritten(self, tmp_path):
        path = tmp_path / "ledger.json"
        full = json.dumps([asdict(_make_entry(pr_number=1))], indent=2)
        truncated = full[: len(full) // 2]
        path.write_text(truncated)
        store = JsonStore(path=str(path))

        with pytest.raises(CorruptLedgerError):
            store.save(_make_entry(pr_number=2))
        with pytest.raises(CorruptLedgerError):
            store.mark_merged("acme/widgets", 1, "2025-10-01T00:00:00+00:00")

        assert path.read_text() == truncated

    def test_corrupt_ledger_raises_on_read(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JsonStore(path=str(path)).list_entries("acme/widgets")

    def test_non_array_ledger_raises(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text('{"repo": "acme/widgets"}')
        with pytest.raises(CorruptLedgerError, match="JSON array"):
            JsonStore(path=str(path)).save(_make_entry())
        assert json.loads(path.read_text()) == {"repo": "acme/widgets"}

    def test_earlier_rows_survive_later_saves(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonStore(path=str(path)).save(_make_entry(pr_number=1))
        JsonStore(path=str(path)).save(_make_entry(pr_number=2))
        assert [e.pr_number for e in JsonStore(path=str(path)).list_entries("acme/widgets")] == [1, 2]

    def test_write_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "ledger.json"
        store = JsonStore(path=str(path))
        store.save(_make_entry(pr_number=1))
        store.mark_merged("acme/widgets", 1, "2025-10-01T00:00:00+00:00")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.json"]

    def test_failed_write_keeps_previous_file(self, tmp_path, mocker):
        path = tmp_path / "ledger.json"
        store = JsonStore(path=str(path))
        store.save(_make_entry(pr_number=1))
        before = path.read_text()

        mocker.patch("chronofill_store.json_file.os.replace", side_effect=OSError("disk full"))
        with pytest.raises(OSError):
            store.save(_make_entry(pr_number=2))

        assert path.read_text() == before
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.json"]

    def test_survives_reopen(self, tmp_path):
        path = str(tmp_path / "ledger.json")
        JsonStore(path=path).save(_make_entry())
        assert len(JsonStore(path=path).list_entries("acme/widgets")) == 1


class TestSQLiteStore:
    def test_survives_reopen(self, tmp_path):
        db = str(tmp_path / "ledger.db")
        first = SQLiteStore(db_path=db)
        first.save(_make_entry())
        first.close()

        second = SQLiteStore(db_path=db)
        assert len(second.list_entries("acme/widgets")) == 1
        second.close()
