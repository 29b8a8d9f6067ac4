"""Tests for the GitRepo subprocess wrapper."""

import os
import shutil
import subprocess
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from chronofill_core.commits import CommitFactory
from chronofill_core.errors import TransactionError
from chronofill_core.git import GitRepo


def _ok(stdout=""):
    return MagicMock(returncode=0, stdout=stdout, stderr="")


@pytest.fixture
def run(mocker):
    return mocker.patch("chronofill_core.git.subprocess.run", return_value=_ok())


class TestCommands:
    def test_add(self, run, tmp_path):
        GitRepo(tmp_path).add(["data.json"])
        args, kwargs = run.call_args
        assert args[0] == ["git", "add", "--", "data.json"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["env"] is None

    def test_push_variants(self, run):
        git = GitRepo()
        git.push()
        git.push("origin", "feature")
        assert run.call_args_list[0].args[0] == ["git", "push"]
        assert run.call_args_list[1].args[0] == ["git", "push", "origin", "feature"]

    def test_checkout_new_branch(self, run):
        GitRepo().checkout_new_branch("commit-1", "main")
        assert run.call_args.args[0] == ["git", "checkout", "-b", "commit-1", "main"]

    def test_pull_and_fetch(self, run):
        git = GitRepo()
        git.fetch()
        git.pull("origin", "main")
        assert run.call_args_list[0].args[0] == ["git", "fetch"]
        assert run.call_args_list[1].args[0] == ["git", "pull", "origin", "main"]


class TestCommit:
    def test_author_date_only(self, run):
        run.side_effect = [_ok(), _ok("abc123\n")]
        sha = GitRepo().commit("msg", date="2025-09-27T10:00:00+00:00")
        commit_call = run.call_args_list[0]
        assert commit_call.args[0] == ["git", "commit", "-m", "msg", "--date", "2025-09-27T10:00:00+00:00"]
        assert commit_call.kwargs["env"] is None
        assert sha == "abc123"

    def test_committer_date_passed_to_child_only(self, run, monkeypatch):
        monkeypatch.delenv("GIT_COMMITTER_DATE", raising=False)
        run.side_effect = [_ok(), _ok("abc123")]
        GitRepo().commit("msg", date="2025-09-27T10:00:00+00:00", committer_date="2025-09-27T10:00:00+00:00")
        env = run.call_args_list[0].kwargs["env"]
        assert env["GIT_COMMITTER_DATE"] == "2025-09-27T10:00:00+00:00"
        assert "GIT_COMMITTER_DATE" not in os.environ


class TestErrors:
    def test_nonzero_exit_raises(self, run):
        run.return_value = MagicMock(returncode=1, stdout="", stderr="fatal: not a git repository\n")
        with pytest.raises(TransactionError) as exc_info:
            GitRepo().checkout("main")
        assert exc_info.value.command == ["git", "checkout", "main"]
        assert "not a git repository" in str(exc_info.value)

    def test_missing_executable_raises(self, run):
        run.side_effect = FileNotFoundError("git")
        with pytest.raises(TransactionError):
            GitRepo().fetch()


class TestRemotes:
    def test_prefers_push_url(self, run):
        run.return_value = _ok(
            "origin\thttps://github.com/acme/widgets.git (fetch)\n"
            "origin\tgit@github.com:acme/widgets.git (push)\n"
            "upstream\thttps://github.com/up/widgets.git (fetch)\n"
            "upstream\thttps://github.com/up/widgets.git (push)\n"
        )
        assert GitRepo().remotes() == {
            "origin": "git@github.com:acme/widgets.git",
            "upstream": "https://github.com/up/widgets.git",
        }

    def test_no_remotes(self, run):
        assert GitRepo().remotes() == {}


# ---------------------------------------------------------------------------
# Against a real repository
# ---------------------------------------------------------------------------


@pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")
class TestRealRepository:
    @pytest.fixture
    def repo(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
        monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
        for var in ("GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME"):
            monkeypatch.setenv(var, "Chrono Fill")
        for var in ("GIT_AUTHOR_EMAIL", "GIT_COMMITTER_EMAIL"):
            monkeypatch.setenv(var, "chronofill@example.com")
        monkeypatch.delenv("GIT_COMMITTER_DATE", raising=False)
        monkeypatch.delenv("GIT_AUTHOR_DATE", raising=False)
        subprocess.run(["git", "init", "-q", str(tmp_path)], check=True)
        return GitRepo(tmp_path)

    def _dates(self, repo):
        out = subprocess.run(
            ["git", "log", "-1", "--format=%aI%n%cI"],
            cwd=repo.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return out.stdout.split()

    def test_author_and_committer_dates_pinned(self, repo):
        ts = datetime(2025, 9, 27, 13, 5, 9, tzinfo=timezone.utc)
        CommitFactory(repo, pin_committer_date=True, note="n").commit(ts, "chore: commit", sequence=1)
        assert self._dates(repo) == [ts.isoformat(), ts.isoformat()]
        assert "GIT_COMMITTER_DATE" not in os.environ

    def test_author_date_pinned_without_committer_override(self, repo):
        ts = datetime(2024, 2, 29, 0, 0, 1, tzinfo=timezone.utc)
        CommitFactory(repo).commit(ts, "Commit on 2024-02-29")
        author, committer = self._dates(repo)
        assert author == ts.isoformat()
        assert committer != ts.isoformat()

    def test_each_commit_changes_tree(self, repo):
        factory = CommitFactory(repo)
        first = factory.commit(datetime(2025, 1, 1, 1, 0, 0, tzinfo=timezone.utc), "one")
        second = factory.commit(datetime(2025, 1, 1, 2, 0, 0, tzinfo=timezone.utc), "two")
        assert first != second
        count = subprocess.run(
            ["git", "rev-list", "--count", "HEAD"], cwd=repo.path, capture_output=True, text=True, check=True
        )
        assert count.stdout.strip() == "2"
