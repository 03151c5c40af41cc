"""Rich terminal summary of a conversion run."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from plogconverter.render.base import JobOutcome
from plogconverter.render.dispatcher import DispatchResult, RunStatus

_STATUS_STYLE = {
    "ok": "bold black on green",
    "failed": "bold white on red",
    "refused": "bold black on yellow",
}


def _status_pill(outcome: JobOutcome) -> Text:
    if outcome.refused_path_transform:
        label = "refused"
    elif outcome.ok:
        label = "ok"
    else:
        label = "failed"
    return Text(f" {label.upper()} ", style=_STATUS_STYLE[label])


def render(
    result: DispatchResult,
    *,
    total_records: int,
    console: Optional[Console] = None,
) -> None:
    """Print a per-target summary table and the final verdict."""
    console = console or Console(stderr=True)

    console.print()
    table = Table(
        title="Conversion Summary",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Target", style="cyan", min_width=12)
    table.add_column("Records", justify="right", style="green")
    table.add_column("Status", justify="center", width=11)
    table.add_column("Output", style="magenta")

    for outcome in result.outcomes:
        table.add_row(
            outcome.target.value,
            str(outcome.count),
            _status_pill(outcome),
            str(outcome.path) if outcome.path else (outcome.error or "-"),
        )

    console.print(table)
    console.print(f"[dim]Records after filtering:[/dim] {total_records}")

    console.print()
    if result.status is RunStatus.SUCCESS:
        console.print("[bold green]Conversion finished.[/bold green]")
    elif result.status is RunStatus.NON_EMPTY_OUTPUT_WARNING:
        console.print("[bold yellow]Conversion finished; diagnostics were reported.[/bold yellow]")
    else:
        console.print(
            f"[bold red]Conversion finished with status {int(result.status)} "
            f"({result.status.name}).[/bold red]"
        )
