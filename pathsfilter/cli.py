from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pathsfilter.auth import resolve_github_token
from pathsfilter.config import (
    RunConfig,
    load_github_context,
    resolve_filters_text,
    resolve_quantifier,
)
from pathsfilter.definitions import parse_filters
from pathsfilter.errors import ConfigurationError, PathsFilterError
from pathsfilter.evaluation import FilterReport, explain, run
from pathsfilter.models import Quantifier
from pathsfilter.outputs import format_value, write_outputs
from pathsfilter.sources import git_changed_files, github_changed_files, resolve_changed_files


SOURCES = {"github", "git"}

app = typer.Typer(help="Evaluate named path filters against a set of changed files.")
console = Console()


def _render_changed_files(paths: list[str]) -> None:
    console.print(f"Changed files detected ({len(paths)}):")
    for path in paths:
        console.print(f"- {path}", markup=False, highlight=False)


def _render_reports(reports: list[FilterReport], quantifier_label: str) -> None:
    table = Table(title=f"Filters ({quantifier_label})")
    table.add_column("Filter")
    table.add_column("Result")
    table.add_column("Patterns", justify="right")
    table.add_column("Matched files")

    for report in reports:
        result = Text(format_value(report.result), style="green" if report.result else "red")
        table.add_row(
            report.name,
            result,
            str(report.pattern_count),
            Text("\n".join(report.matched_files)),
        )

    console.print(table)


async def _action_async(source: str, base: str | None, quantifier: str | None) -> int:
    try:
        filters_text = resolve_filters_text()
    except ConfigurationError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    # Everything past this point is fail-open: report, emit nothing, succeed.
    try:
        source_normalized = source.lower().strip()
        if source_normalized not in SOURCES:
            raise ConfigurationError("Invalid --source value. Use 'github' or 'git'.")

        context = load_github_context()
        resolved_quantifier = resolve_quantifier(quantifier)

        if source_normalized == "git":
            base_ref = base or context.base_ref
            changed_files = await resolve_changed_files(
                lambda: git_changed_files(base_ref), console=console
            )
        else:
            context.token = resolve_github_token()
            changed_files = await resolve_changed_files(
                lambda: github_changed_files(context, console=console), console=console
            )

        _render_changed_files(changed_files)
        results = run(
            RunConfig(
                filters_text=filters_text,
                changed_files=tuple(changed_files),
                quantifier=resolved_quantifier,
            )
        )
        write_outputs(results, output_path=context.output_path, console=console)
        for name, value in results.items():
            console.print(f"Filter '{name}' -> {format_value(value)}", markup=False)
    except Exception as exc:
        console.print(f"[yellow]paths-filter encountered an error:[/yellow] {escape(str(exc))}")
        return 0
    return 0


@app.command()
def action(
    source: str = typer.Option(
        "github",
        "--source",
        help="Where changed files come from: github (pull request API) or git (local diff).",
    ),
    base: str | None = typer.Option(
        None,
        "--base",
        help="Base revision for --source git. Defaults to the pull request base SHA, then origin/master.",
    ),
    quantifier: str | None = typer.Option(
        None,
        "--quantifier",
        help="some (any file matches) or every (all files match). Defaults to INPUT_PREDICATE-QUANTIFIER.",
    ),
) -> None:
    """GitHub Actions entrypoint: write one name=true|false output per filter."""
    raise typer.Exit(code=asyncio.run(_action_async(source, base, quantifier)))


async def _check_async(
    paths: tuple[str, ...],
    filters: str | None,
    filters_file: Path | None,
    base: str | None,
    quantifier: str,
    output: Path | None,
) -> int:
    try:
        filters_text = resolve_filters_text(filters, filters_file)
        resolved_quantifier = resolve_quantifier(quantifier)
        filter_set = parse_filters(filters_text)
        if paths:
            changed_files = list(paths)
        else:
            base_ref = base or load_github_context().base_ref
            console.print(f"Diffing against [bold]{escape(base_ref)}[/bold] ...")
            changed_files = await git_changed_files(base_ref)
    except PathsFilterError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    _render_changed_files(changed_files)
    reports = explain(filter_set, changed_files, resolved_quantifier)
    _render_reports(reports, "every" if resolved_quantifier is Quantifier.ALL else "some")

    if output is not None:
        results = {report.name: report.result for report in reports}
        if write_outputs(results, output_path=output, console=console):
            console.print(f"Outputs appended to {output}", markup=False)
    return 0


@app.command()
def check(
    paths: list[str] | None = typer.Argument(
        None,
        help="Changed file paths. Defaults to `git diff --name-only <base> HEAD`.",
    ),
    filters: str | None = typer.Option(
        None,
        "--filters",
        help="Filter definitions as text.",
    ),
    filters_file: Path | None = typer.Option(
        None,
        "--filters-file",
        "-f",
        help="File containing filter definitions.",
    ),
    base: str | None = typer.Option(
        None,
        "--base",
        help="Base revision to diff against when no paths are given.",
    ),
    quantifier: str = typer.Option(
        "some",
        "--quantifier",
        help="some (any file matches) or every (all files match).",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        help="Also append name=true|false lines to this file.",
    ),
) -> None:
    """Evaluate filters locally and show which files each filter matched."""
    raise typer.Exit(
        code=asyncio.run(
            _check_async(tuple(paths or ()), filters, filters_file, base, quantifier, output)
        )
    )
