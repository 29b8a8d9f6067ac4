"""merge command: merge the ledger's still-open PRs in creation order."""

from __future__ import annotations

import click
from rich.console import Console

from chronofill_cli.auth import require_github_token
from chronofill_cli.context import reports_errors, run_config, to_record, utc_now
from chronofill_core.gh.pull_request import get_repo
from chronofill_core.git import GitRepo
from chronofill_core.orchestrator import BranchPROrchestrator
from chronofill_core.repo_context import resolve_repo_identity
from chronofill_store.noop import NoOpStore

console = Console()


@click.command("merge")
@click.pass_context
@reports_errors
def merge_cmd(ctx):
    """Resume an interrupted merge pass from the PR ledger.

    Requires a store (`store: json` or `store: sqlite` in .chronofill.yml).
    """
    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError("No store configured. Add 'store: json' or 'store: sqlite' to .chronofill.yml.")

    config = run_config(ctx)
    token = require_github_token(config)
    git = GitRepo()
    identity = resolve_repo_identity(git, config["remote"])

    pending = store.list_entries(identity.slug, pending_only=True)
    if not pending:
        console.print("[yellow]No unmerged pull requests recorded.[/yellow]")
        return

    orchestrator = BranchPROrchestrator(
        git,
        None,
        get_repo(identity.slug, token),
        base_branch=config["base_branch"],
        remote=config["remote"],
        merge_method=config["merge_method"],
    )
    merged = orchestrator.merge_all(
        [to_record(e) for e in pending],
        on_merged=lambda record: store.mark_merged(identity.slug, record.pr_number, utc_now()),
    )
    console.print(f"[bold green]Merged {len(merged)} PR(s).[/bold green]")
