"""GitHub token resolution with gh CLI fallback.

Resolution order (stops at first success):
  1. github_token from config (already seeded from GITHUB_TOKEN by load_config)
  2. GH_TOKEN environment variable (the name the gh CLI itself honours)
  3. `gh auth token` (GitHub CLI session, works after `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess

from chronofill_core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_github_token(config: dict | None = None) -> str | None:
    """Return a GitHub token or None if no source has one. Never raises."""
    token = (config or {}).get("github_token") or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session.")
        return result.stdout.strip()
    return None


def require_github_token(config: dict) -> str:
    """Like resolve_github_token(), but a missing token is fatal."""
    token = resolve_github_token(config)
    if not token:
        raise ConfigurationError(
            "GITHUB_TOKEN is not set. Provide a token with 'repo' permissions or run `gh auth login` first."
        )
    config["github_token"] = token
    return token
