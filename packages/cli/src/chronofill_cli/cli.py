"""CLI entry point for chronofill.

Commands:
  commits  backdated commits on the current branch, one push at the end
  prs      one branch + commit + pull request per event, then merge them all
  merge    resume merging the PRs recorded in the ledger
  history  display the PRs recorded in the ledger
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from chronofill_cli.commands.commits import commits_cmd
from chronofill_cli.commands.history import history_cmd
from chronofill_cli.commands.merge import merge_cmd
from chronofill_cli.commands.prs import prs_cmd
from chronofill_core.errors import ConfigurationError

console = Console()


def _build_store(config: dict):
    """Instantiate the configured ledger from .chronofill.yml settings.

    Store selection:
      store: json   → JsonStore   (store_path or .chronofill-ledger.json)
      store: sqlite → SQLiteStore (store_path or .chronofill.db)
      (default)     → NoOpStore   (nothing recorded)
    """
    from chronofill_store.noop import NoOpStore

    store_type = config.get("store") or "noop"
    store_path = config.get("store_path")

    if store_type == "json":
        from chronofill_store.json_file import DEFAULT_PATH, JsonStore

        return JsonStore(path=store_path or DEFAULT_PATH)

    if store_type == "sqlite":
        from chronofill_store.sqlite import DEFAULT_PATH, SQLiteStore

        return SQLiteStore(db_path=store_path or DEFAULT_PATH)

    if store_type != "noop":
        console.print(f"[yellow]Unknown store {store_type!r}. Falling back to no store.[/yellow]")
    return NoOpStore()


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # PyGithub and urllib3 are chatty at DEBUG.
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("chronofill"),
    prog_name="chronofill",
)
@click.option(
    "--config",
    "config_path",
    default=".chronofill.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CHRONOFILL_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every git command and state transition.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Generate backdated commit and pull-request activity across a date range."""
    from chronofill_core.config import load_config

    ctx.ensure_object(dict)
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(commits_cmd)
main.add_command(prs_cmd)
main.add_command(merge_cmd)
main.add_command(history_cmd)
