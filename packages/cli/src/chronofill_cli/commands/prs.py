"""prs command: one branch, commit and pull request per event, then merge them all."""

from __future__ import annotations

import logging

import click

from chronofill_cli.auth import require_github_token
from chronofill_cli.context import print_plan, print_summary, reports_errors, run_config, to_entry, utc_now
from chronofill_core.commits import CommitFactory
from chronofill_core.errors import MergeError
from chronofill_core.gh.pull_request import get_repo
from chronofill_core.git import GitRepo
from chronofill_core.orchestrator import BranchPROrchestrator
from chronofill_core.repo_context import resolve_repo_identity
from chronofill_core.runner import RunController
from chronofill_core.scheduler import RandomScheduler

logger = logging.getLogger(__name__)


@click.command("prs")
@click.option("--start", "start_date", default=None, help="First day (YYYY-MM-DD). Overrides config file.")
@click.option("--end", "end_date", default=None, help="Last day, inclusive (YYYY-MM-DD). Overrides config file.")
@click.option("--seed", type=int, default=None, help="Seed the random schedule for a reproducible plan.")
@click.option("--base", "base_branch", default=None, help="Branch to fork from and merge into.")
@click.option("--no-merge", is_flag=True, help="Open the PRs but leave them unmerged.")
@click.option("--dry-run", is_flag=True, help="Print the planned schedule without touching git or GitHub.")
@click.pass_context
@reports_errors
def prs_cmd(
    ctx,
    start_date: str | None,
    end_date: str | None,
    seed: int | None,
    base_branch: str | None,
    no_merge: bool,
    dry_run: bool,
):
    """Open and merge one pull request per synthetic commit.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token with 'repo' scope (or use gh CLI)
    """
    config = run_config(ctx, start_date=start_date, end_date=end_date, seed=seed, base_branch=base_branch)
    controller = RunController(
        RandomScheduler.from_config(config),
        start=config["start_date"],
        end=config["end_date"],
    )

    if dry_run:
        print_plan(controller)
        return

    # Every precondition is checked before the first git mutation.
    token = require_github_token(config)
    git = GitRepo()
    identity = resolve_repo_identity(git, config["remote"])
    logger.info("Repository: %s", identity.slug)
    repo = get_repo(identity.slug, token)

    factory = CommitFactory(git, marker_file=config["marker_file"], pin_committer_date=True, note=config["note"])
    orchestrator = BranchPROrchestrator(
        git,
        factory,
        repo,
        base_branch=config["base_branch"],
        remote=config["remote"],
        merge_method=config["merge_method"],
    )

    store = ctx.obj["store"]
    try:
        summary = controller.run_pull_requests(
            orchestrator,
            on_created=lambda record: store.save(to_entry(record, identity.slug)),
            on_merged=lambda record: store.mark_merged(identity.slug, record.pr_number, utc_now()),
            merge=not no_merge,
        )
    except MergeError as e:
        logger.warning("%d PR(s) merged before the failure; run `chronofill merge` to resume.", len(e.merged))
        raise
    print_summary(summary)
