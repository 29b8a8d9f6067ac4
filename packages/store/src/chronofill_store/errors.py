"""Store-layer exceptions, independent of chronofill_core."""

from __future__ import annotations


class StoreError(Exception):
    """The ledger cannot be read or written safely."""


class CorruptLedgerError(StoreError):
    def __init__(self, path, reason: str):
        super().__init__(f"Ledger {path} is unreadable ({reason}); fix or move it aside before continuing.")
        self.path = path
