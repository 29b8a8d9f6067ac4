"""Helpers shared by the chronofill subcommands.

The CLI is the only layer that knows both chronofill_core and
chronofill_store; the record/entry mapping lives here for that reason.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone

import click
from rich.console import Console
from rich.table import Table

from chronofill_core.config import validate_config
from chronofill_core.errors import ChronofillError
from chronofill_core.models import PullRequestRecord, RunSummary
from chronofill_core.runner import RunController
from chronofill_store.errors import StoreError
from chronofill_store.models import PullRequestEntry

console = Console()
logger = logging.getLogger("chronofill_cli")


def reports_errors(func):
    """Turn a ChronofillError or StoreError into a logged error and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ChronofillError, StoreError) as e:
            logger.error("%s", e)
            raise click.ClickException(str(e)) from e

    return wrapper


def run_config(ctx: click.Context, **overrides) -> dict:
    """Return a validated copy of the group config with non-None overrides applied."""
    config = dict(ctx.obj["config"])
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    return validate_config(config)


def to_entry(record: PullRequestRecord, repo: str) -> PullRequestEntry:
    return PullRequestEntry(
        repo=repo,
        branch=record.branch,
        pr_number=record.pr_number,
        pr_url=record.pr_url,
        committed_at=record.committed_at.isoformat(),
        created_at=utc_now(),
    )


def to_record(entry: PullRequestEntry) -> PullRequestRecord:
    return PullRequestRecord(
        branch=entry.branch,
        pr_number=entry.pr_number,
        pr_url=entry.pr_url,
        committed_at=datetime.fromisoformat(entry.committed_at),
    )


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def print_plan(controller: RunController) -> None:
    """Render the schedule a run would follow, without executing it."""
    table = Table(title="Planned commits", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold", no_wrap=True)
    table.add_column("Commits", justify="right", no_wrap=True)
    table.add_column("Times")

    total = 0
    for day_plan, events in controller.plan():
        total += day_plan.commit_count
        times = ", ".join(e.timestamp.strftime("%H:%M:%S") for e in events)
        table.add_row(day_plan.date.isoformat(), str(day_plan.commit_count), times)

    console.print(table)
    console.print(f"[dim]Dry run: {total} commit(s) planned, nothing written.[/dim]")


def print_summary(summary: RunSummary) -> None:
    console.print(f"\n[bold green]Done![/bold green] {summary.commits} commit(s) across {summary.days} day(s).")
    if summary.pushed:
        console.print("Pushed to the current branch's upstream.")
    if summary.pull_requests:
        console.print(f"Opened {len(summary.pull_requests)} PR(s), merged {len(summary.merged)}.")
