"""Exception hierarchy shared by every chronofill layer.

Nothing in the pipeline swallows these: each one surfaces to the CLI, which
logs it and exits with a non-zero status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronofill_core.models import PullRequestRecord


class ChronofillError(Exception):
    """Base class for all chronofill failures."""


class ConfigurationError(ChronofillError):
    """A required setting or credential is missing or malformed."""


class RemoteIdentityError(ChronofillError):
    """The owner/repository of the remote could not be determined."""


class NoOriginRemoteError(RemoteIdentityError):
    def __init__(self, remote: str = "origin"):
        super().__init__(f'No "{remote}" remote found')
        self.remote = remote


class UnparseableRemoteError(RemoteIdentityError):
    def __init__(self, url: str):
        super().__init__(f"Cannot parse owner/repo from remote URL {url!r}")
        self.url = url


class TransactionError(ChronofillError):
    """A git command exited unsuccessfully."""

    def __init__(self, command: list[str], stderr: str = "", returncode: int | None = None):
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"`{' '.join(command)}` failed: {detail}")
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class RemoteAPIError(ChronofillError):
    """A call to the code-hosting API failed."""


class MergeError(RemoteAPIError):
    """The merge pass stopped at ``failed``; ``merged`` lists what went through first."""

    def __init__(self, failed: PullRequestRecord, merged: list[PullRequestRecord], reason: str):
        super().__init__(f"Merging PR #{failed.pr_number} failed after {len(merged)} merge(s): {reason}")
        self.failed = failed
        self.merged = merged
