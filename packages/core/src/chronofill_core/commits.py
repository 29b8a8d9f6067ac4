"""Backdated commits: marker-file write, stage, commit."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from chronofill_core.git import GitRepo

logger = logging.getLogger(__name__)


def write_marker(path: Path, payload: dict) -> None:
    """Overwrite the marker file so the next commit has a distinct tree."""
    path.write_text(json.dumps(payload, indent=2) + "\n")


class CommitFactory:
    """Creates one commit per call, dated at the requested timestamp.

    With ``pin_committer_date`` the committer date is forced to the same
    value as the author date, so the hosting platform credits the commit to
    that day whichever date it looks at.
    """

    def __init__(
        self,
        git: GitRepo,
        marker_file: str | Path = "data.json",
        pin_committer_date: bool = False,
        note: str | None = None,
    ):
        self._git = git
        self._marker_name = Path(marker_file)
        self._pin_committer_date = pin_committer_date
        self._note = note

    @property
    def marker_path(self) -> Path:
        return self._git.path / self._marker_name

    def _payload(self, stamp: str, sequence: int | None) -> dict:
        payload: dict = {"date": stamp}
        if sequence is not None:
            payload["sequence"] = sequence
        if self._note is not None:
            payload["note"] = self._note
        return payload

    def commit(self, timestamp: datetime, message: str, sequence: int | None = None) -> str:
        """Write, stage and commit; returns the new commit sha.

        Git failures propagate as TransactionError. Nothing is retried.
        """
        stamp = timestamp.isoformat()
        write_marker(self.marker_path, self._payload(stamp, sequence))
        self._git.add([self._marker_name])
        sha = self._git.commit(
            message,
            date=stamp,
            committer_date=stamp if self._pin_committer_date else None,
        )
        logger.debug("Committed %s at %s", sha[:7] if sha else "?", stamp)
        return sha
