"""commits command: backdated commits on the current branch, pushed once at the end."""

from __future__ import annotations

import click

from chronofill_cli.context import print_plan, print_summary, reports_errors, run_config
from chronofill_core.commits import CommitFactory
from chronofill_core.git import GitRepo
from chronofill_core.runner import RunController
from chronofill_core.scheduler import RandomScheduler


@click.command("commits")
@click.option("--start", "start_date", default=None, help="First day (YYYY-MM-DD). Overrides config file.")
@click.option("--end", "end_date", default=None, help="Last day, inclusive (YYYY-MM-DD). Overrides config file.")
@click.option("--seed", type=int, default=None, help="Seed the random schedule for a reproducible plan.")
@click.option("--no-push", is_flag=True, help="Commit locally but do not push.")
@click.option("--dry-run", is_flag=True, help="Print the planned schedule without committing.")
@click.pass_context
@reports_errors
def commits_cmd(ctx, start_date: str | None, end_date: str | None, seed: int | None, no_push: bool, dry_run: bool):
    """Fill the date range with 5-10 randomly timed commits per day.

    Each commit rewrites the marker file and is dated with --date, then the
    whole batch is pushed with a single `git push`.
    """
    config = run_config(ctx, start_date=start_date, end_date=end_date, seed=seed)
    controller = RunController(
        RandomScheduler.from_config(config),
        start=config["start_date"],
        end=config["end_date"],
    )

    if dry_run:
        print_plan(controller)
        return

    git = GitRepo()
    factory = CommitFactory(git, marker_file=config["marker_file"])
    summary = controller.run_commits(factory, git, push=not no_push)
    print_summary(summary)
