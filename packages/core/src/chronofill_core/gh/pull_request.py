from __future__ import annotations

from github import Github, GithubException

from chronofill_core.errors import RemoteAPIError


def get_repo(repo_name: str, token: str):
    try:
        return Github(token).get_repo(repo_name)
    except GithubException as e:
        raise RemoteAPIError(f"Cannot access repository {repo_name}: {_describe(e)}") from e


def open_pull(repo, title: str, body: str, head: str, base: str) -> tuple[int, str]:
    """Open a pull request and return its (number, html_url)."""
    try:
        pr = repo.create_pull(title=title, body=body, head=head, base=base)
    except GithubException as e:
        raise RemoteAPIError(f"Creating PR {head} -> {base} failed: {_describe(e)}") from e
    return pr.number, pr.html_url


def merge_pull(repo, pr_number: int, method: str = "merge") -> None:
    """Merge a pull request; an unmerged status is treated as a failure."""
    try:
        status = repo.get_pull(pr_number).merge(merge_method=method)
    except GithubException as e:
        raise RemoteAPIError(f"Merging PR #{pr_number} failed: {_describe(e)}") from e
    if not status.merged:
        raise RemoteAPIError(f"PR #{pr_number} was not merged: {status.message}")


def _describe(e: GithubException) -> str:
    data = e.data if isinstance(e.data, dict) else {}
    return f"{e.status} {data.get('message', '')}".strip()
