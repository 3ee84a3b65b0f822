from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from routeaudit.config import ConfigError, load_config, merge_overrides
from routeaudit.orchestrator.pipeline import run_check
from routeaudit.rules.descriptors import REGISTRY
from routeaudit.rules.template import normalize_template


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def check(
    path: str = typer.Argument(..., help="File or directory to check"),
    format: str = typer.Option("table", help="Output format: table|json"),
    workers: Optional[int] = typer.Option(None, help="Parallel file workers"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned files (debug)"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", help="Rule id to ignore (repeatable)"),
    no_fail: bool = typer.Option(False, "--no-fail", help="Exit 0 even when diagnostics are found"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    _setup_logging(verbose)

    target = Path(path).expanduser().resolve()
    if not target.exists():
        raise typer.BadParameter(f"Path does not exist: {target}")

    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    try:
        config = merge_overrides(
            load_config(target),
            workers=workers,
            max_files=max_files,
            ignore=ignore,
            fail_on_diagnostic=False if no_fail else None,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc

    result = run_check(target, config)

    if fmt == "json":
        payload = {
            "root": result.root,
            "files_scanned": result.files_scanned,
            "methods_checked": result.methods_checked,
            "skipped_files": result.skipped_files,
            "diagnostics": [d.model_dump() for d in result.diagnostics],
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        _print_table(result)

    if result.diagnostics and config.fail_on_diagnostic:
        raise typer.Exit(code=1)


def _print_table(result) -> None:
    console.print(f"[bold green]routeaudit[/bold green] check: {escape(result.root)}")
    console.print(f"Python files scanned: {result.files_scanned}")
    console.print(f"Methods checked: {result.methods_checked}")
    for rel in result.skipped_files:
        console.print(f"  [yellow]skipped[/yellow] {escape(rel)}")
    console.print("")

    if not result.diagnostics:
        console.print("No endpoint problems found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("FILE:LINE:COL", no_wrap=True)
    table.add_column("RULE", no_wrap=True)
    table.add_column("MESSAGE")

    for d in result.diagnostics:
        loc = d.location
        table.add_row(
            escape(f"{loc.path}:{loc.line}:{loc.column}"),
            f"{d.rule_id} {d.severity}",
            escape(d.message),
        )

    console.print(table)
    console.print(f"Diagnostics: [bold]{len(result.diagnostics)}[/bold]")


@app.command()
def rules(
    details: bool = typer.Option(False, "--details", help="Also print each rule's description"),
) -> None:
    """List the diagnostics routeaudit can report."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", no_wrap=True)
    table.add_column("NAME", no_wrap=True)
    table.add_column("SEVERITY", no_wrap=True)
    table.add_column("CATEGORY", no_wrap=True)
    table.add_column("TITLE")
    table.add_column("MESSAGE")

    for d in REGISTRY.values():
        table.add_row(d.rule_id, d.name, d.severity, d.category, escape(d.title), escape(d.message_format))

    console.print(table)

    if details:
        for d in REGISTRY.values():
            typer.echo(f"{d.rule_id}: {d.title}")
            typer.echo(f"    {d.description}")


@app.command()
def normalize(template: str = typer.Argument(..., help="Endpoint template, e.g. repos/:owner/:repo")) -> None:
    """Show the positional form a declared template is compared as."""
    typer.echo(normalize_template(template))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
