"""history command: list the pull requests recorded in the ledger."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from chronofill_cli.context import reports_errors
from chronofill_core.git import GitRepo
from chronofill_core.repo_context import resolve_repo_identity

console = Console()


@click.command("history")
@click.option("--repo", default=None, help="Repository (owner/name). Defaults to the origin remote.")
@click.option("--pending", is_flag=True, help="Only show PRs that are not merged yet.")
@click.option("--limit", default=20, show_default=True, help="Maximum number of records to show.")
@click.pass_context
@reports_errors
def history_cmd(ctx, repo: str | None, pending: bool, limit: int):
    """Show pull requests opened by previous `chronofill prs` runs."""
    from chronofill_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError("No store configured. Add 'store: json' or 'store: sqlite' to .chronofill.yml.")

    if repo is None:
        repo = resolve_repo_identity(GitRepo(), ctx.obj["config"]["remote"]).slug

    entries = store.list_entries(repo, pending_only=pending)
    if not entries:
        console.print("[yellow]No pull requests recorded.[/yellow]")
        return

    # Most recent first, capped at --limit.
    entries = list(reversed(entries))[:limit]

    table = Table(title=f"Pull requests for {repo}", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", no_wrap=True)
    table.add_column("Branch")
    table.add_column("Committed At", no_wrap=True)
    table.add_column("Status", no_wrap=True)

    for e in entries:
        status = "[yellow]open[/yellow]" if e.pending else "[green]merged[/green]"
        table.add_row(f"#{e.pr_number}", e.branch, e.committed_at[:19].replace("T", " "), status)

    console.print(table)
