"""Rich terminal reporter — per-file table, type and scope verdicts."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from diffsense.analysis.models import ContextAnalysis, Magnitude
from diffsense.git.models import FileStatus
from diffsense.redaction.models import RedactionResult

_MAGNITUDE_STYLE = {
    Magnitude.TINY: "bright_cyan",
    Magnitude.SMALL: "green",
    Magnitude.MEDIUM: "yellow",
    Magnitude.LARGE: "dark_orange",
    Magnitude.MASSIVE: "bold red",
}

_STATUS_ICON = {
    FileStatus.ADDED: "A",
    FileStatus.MODIFIED: "M",
    FileStatus.DELETED: "D",
    FileStatus.RENAMED: "R",
}


def _confidence(value: float) -> Text:
    style = "green" if value >= 0.7 else "yellow" if value >= 0.4 else "red"
    return Text(f"{value:.0%}", style=style)


def render(analysis: ContextAnalysis, *, console: Optional[Console] = None) -> None:
    """Print a ContextAnalysis using Rich."""
    console = console or Console()

    table = Table(
        title="Changed Files",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("St", justify="center", width=3)
    table.add_column("File", style="magenta")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Size", justify="center")
    table.add_column("Keywords", style="cyan")

    for f in analysis.files:
        table.add_row(
            _STATUS_ICON[f.status],
            f.path if f.old_path is None else f"{f.old_path} → {f.path}",
            str(f.additions),
            str(f.deletions),
            Text(f.magnitude.value, style=_MAGNITUDE_STYLE[f.magnitude]),
            ", ".join(f.keywords) or "-",
        )

    console.print(table)
    console.print()

    type_line = Text("Type:      ", style="dim")
    type_line.append(analysis.type.type.value, style="bold")
    type_line.append("  ")
    type_line.append_text(_confidence(analysis.type.confidence))
    console.print(type_line)

    scope_line = Text("Scope:     ", style="dim")
    scope_line.append(", ".join(analysis.scope.scopes) or "-", style="bold")
    if analysis.scope.scopes:
        scope_line.append("  ")
        scope_line.append_text(_confidence(analysis.scope.confidence))
    console.print(scope_line)

    if analysis.breaking:
        console.print("[bold red]Breaking:  likely[/bold red]")
    else:
        console.print("[dim]Breaking:[/dim]  no")

    console.print(
        f"[dim]Lines:[/dim]     [green]+{analysis.total_additions}[/green] "
        f"[red]-{analysis.total_deletions}[/red]"
    )
    console.print(f"[dim]Summary:[/dim]   {analysis.summary}")

    if analysis.type.reasons:
        console.print()
        console.print("[dim]Why:[/dim]")
        for reason in analysis.type.reasons:
            console.print(f"  [dim]•[/dim] {reason}")


def render_redaction(result: RedactionResult, *, console: Optional[Console] = None) -> None:
    """Print redaction diagnostics (to stderr by default)."""
    console = console or Console(stderr=True)
    if not result.found:
        console.print("[green]No sensitive data found.[/green]")
        return
    console.print(
        f"[bold yellow]Redacted {result.match_count} match(es)[/bold yellow] "
        f"[dim]({', '.join(result.matched_pattern_names)})[/dim]"
    )
