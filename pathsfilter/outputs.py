from __future__ import annotations

from pathlib import Path
from typing import Mapping

from rich.console import Console
from rich.markup import escape


def format_value(value: bool) -> str:
    return "true" if value else "false"


def _print_legacy(console: Console, name: str, value: str) -> None:
    console.print(
        f"::set-output name={name}::{value}",
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def write_outputs(
    results: Mapping[str, bool],
    *,
    output_path: str | Path | None,
    console: Console | None = None,
) -> bool:
    """Append `name=value` lines to the CI output file.

    Falls back to the legacy `::set-output` workflow command when no output
    file is configured or it cannot be written. Returns True when the file was used.
    """
    lines = [(name, format_value(value)) for name, value in results.items()]
    console = console or Console()

    if output_path:
        try:
            with Path(output_path).open("a", encoding="utf-8") as fh:
                fh.write("".join(f"{name}={value}\n" for name, value in lines))
            return True
        except OSError as exc:
            console.print(f"[yellow]Cannot write outputs to {escape(str(output_path))}:[/yellow] {escape(str(exc))}")

    for name, value in lines:
        _print_legacy(console, name, value)
    return False
