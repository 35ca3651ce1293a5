"""CLI interface using Typer."""

import logging
import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mergegate import __version__
from mergegate.analyzers import default_registry, load_builtin_analyzers
from mergegate.errors import ReviewError
from mergegate.models import Scope, ScopeRequest
from mergegate.output import get_formatter
from mergegate.review import run_review

app = typer.Typer(
  name="mergegate",
  help="Scope-aware code review with a single merge recommendation",
  no_args_is_help=True,
)

console = Console()


def _is_debug() -> bool:
  return os.environ.get("MERGEGATE_DEBUG", "").lower() in ("1", "true", "yes")


def _configure_logging(debug: bool) -> None:
  logging.basicConfig(
    level=logging.DEBUG if debug else logging.WARNING,
    format="%(message)s",
    handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    force=True,
  )


def version_callback(value: bool) -> None:
  if value:
    console.print(f"mergegate {__version__}")
    raise typer.Exit()


@app.callback()
def main(
  version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
  """Review code changes and produce a merge recommendation."""


@app.command()
def review(
  target: Optional[str] = typer.Argument(
    None,
    help="PR number, ref range (main..feature) or paths, depending on --scope",
  ),
  scope: Scope = typer.Option(Scope.WORKTREE, "--scope", "-s", help="What to review"),
  filters: Optional[list[str]] = typer.Option(
    None, "--filter", "-F", help="Only review paths matching this glob (repeatable)"
  ),
  format_type: str = typer.Option(
    "terminal", "--format", help="Output format: terminal, json, markdown, github"
  ),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  exit_code: bool = typer.Option(
    False, "--exit-code", help="Exit 1 when the recommendation is request-changes or block"
  ),
  debug: bool = typer.Option(False, "--debug", "-d", help="Verbose logging and full tracebacks"),
) -> None:
  """Review a scope and print the report.

  With no arguments, reviews uncommitted worktree changes.
  """
  show_traceback = debug or _is_debug()
  _configure_logging(show_traceback)

  try:
    formatter = get_formatter(format_type)
    request = ScopeRequest(scope=scope, target=target, path_filters=filters or ())
    report = run_review(request, config_path=config)
  except (ReviewError, FileNotFoundError, ValueError) as e:
    console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(1) from None
  except Exception as e:
    console.print(f"[red]Error:[/red] {e}")
    if show_traceback:
      console.print("\n[dim]Traceback:[/dim]")
      console.print(traceback.format_exc())
    raise typer.Exit(1) from None

  report = report.with_timestamp(datetime.now(timezone.utc).isoformat())
  output = formatter.format(report)
  if output:
    console.print(output, markup=False, highlight=False, soft_wrap=True)

  if exit_code and report.verdict.blocks_merge:
    raise typer.Exit(1)


@app.command()
def analyzers() -> None:
  """List built-in analyzers."""
  load_builtin_analyzers()

  table = Table(show_header=True, header_style="bold")
  table.add_column("Analyzer", no_wrap=True)
  table.add_column("Category")
  table.add_column("Globs")
  table.add_column("Timeout", justify="right")

  for descriptor in default_registry().descriptors():
    table.add_row(
      descriptor.id,
      descriptor.category.value,
      ", ".join(descriptor.applicable_globs) or "*",
      f"{descriptor.timeout_budget.total_seconds():g}s",
    )

  console.print(table)


if __name__ == "__main__":
  app()
