"""Derive the hosting owner/repository from a git remote URL.

Matchers are tried in order and the first hit wins:
  git@github.com:acme/widgets.git        (scp-like SSH)
  ssh://git@github.com:22/acme/widgets   (SSH URL)
  https://github.com/acme/widgets.git    (HTTP(S), optional credentials/port)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from chronofill_core.errors import NoOriginRemoteError, UnparseableRemoteError
from chronofill_core.git import GitRepo

_OWNER_REPO = r"(?P<owner>[^/:\s]+)/(?P<name>[^/\s]+?)(?:\.git)?/?"

_SCP_SSH_RE = re.compile(rf"^(?:[\w.-]+@)?(?P<host>[\w.-]+):{_OWNER_REPO}$")
_SSH_URL_RE = re.compile(rf"^ssh://(?:[\w.-]+@)?(?P<host>[\w.-]+)(?::\d+)?/{_OWNER_REPO}$")
_HTTP_RE = re.compile(rf"^https?://(?:[^@/\s]+@)?(?P<host>[\w.-]+)(?::\d+)?/{_OWNER_REPO}$")


@dataclass(frozen=True)
class RepoIdentity:
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


def _regex_matcher(pattern: re.Pattern) -> Callable[[str], Optional[RepoIdentity]]:
    def match(url: str) -> Optional[RepoIdentity]:
        m = pattern.match(url)
        if m is None:
            return None
        return RepoIdentity(owner=m.group("owner"), name=m.group("name"))

    return match


_MATCHERS = [
    _regex_matcher(_SSH_URL_RE),
    _regex_matcher(_HTTP_RE),
    _regex_matcher(_SCP_SSH_RE),
]


def parse_remote_url(url: str) -> RepoIdentity:
    url = url.strip()
    for matcher in _MATCHERS:
        identity = matcher(url)
        if identity is not None:
            return identity
    raise UnparseableRemoteError(url)


def resolve_repo_identity(git: GitRepo, remote: str = "origin") -> RepoIdentity:
    """Read ``remote`` from the repository and parse its URL. Not cached."""
    url = git.remotes().get(remote)
    if not url:
        raise NoOriginRemoteError(remote)
    return parse_remote_url(url)
