"""Thin wrapper around the ``git`` executable.

Each method is one git invocation that either succeeds or raises
TransactionError carrying the failed command and its stderr. Environment
overrides (for example a pinned committer date) are passed per call and
never written to ``os.environ``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable, Mapping
from pathlib import Path

from chronofill_core.errors import TransactionError

logger = logging.getLogger(__name__)


class GitRepo:
    def __init__(self, path: str | Path = ".", executable: str = "git"):
        self.path = Path(path)
        self._executable = executable

    def _run(self, *args: str, env: Mapping[str, str] | None = None) -> str:
        command = [self._executable, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                cwd=self.path,
                capture_output=True,
                text=True,
                env={**os.environ, **env} if env else None,
            )
        except FileNotFoundError as e:
            raise TransactionError(command, stderr=str(e)) from e
        if result.returncode != 0:
            raise TransactionError(command, stderr=result.stderr, returncode=result.returncode)
        return result.stdout.strip()

    def add(self, paths: Iterable[str | Path]) -> None:
        self._run("add", "--", *(str(p) for p in paths))

    def commit(self, message: str, date: str | None = None, committer_date: str | None = None) -> str:
        """Create a commit from the index and return its sha.

        ``date`` sets the author date (``--date``); ``committer_date`` is
        handed to this one git process as GIT_COMMITTER_DATE.
        """
        args = ["commit", "-m", message]
        if date is not None:
            args += ["--date", date]
        env = {"GIT_COMMITTER_DATE": committer_date} if committer_date is not None else None
        self._run(*args, env=env)
        return self.head()

    def push(self, remote: str | None = None, branch: str | None = None) -> None:
        args = ["push"]
        if remote is not None:
            args.append(remote)
            if branch is not None:
                args.append(branch)
        self._run(*args)

    def checkout(self, branch: str) -> None:
        self._run("checkout", branch)

    def checkout_new_branch(self, name: str, start_point: str) -> None:
        self._run("checkout", "-b", name, start_point)

    def fetch(self, remote: str | None = None) -> None:
        self._run(*(["fetch", remote] if remote else ["fetch"]))

    def pull(self, remote: str, branch: str) -> None:
        self._run("pull", remote, branch)

    def head(self) -> str:
        return self._run("rev-parse", "HEAD")

    def remotes(self) -> dict[str, str]:
        """Map remote name to URL, preferring the push URL over the fetch URL."""
        urls: dict[str, dict[str, str]] = {}
        for line in self._run("remote", "-v").splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            kind = parts[2].strip("()") if len(parts) > 2 else "fetch"
            urls.setdefault(parts[0], {})[kind] = parts[1]
        return {name: kinds.get("push") or kinds.get("fetch", "") for name, kinds in urls.items()}
