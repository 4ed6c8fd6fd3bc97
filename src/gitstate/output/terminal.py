"""Rich terminal reporter: branch line, change table, summary."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gitstate.git.models import AppFileStatus, StatusResult

_STATUS_STYLE = {
    AppFileStatus.NEW: "bold green",
    AppFileStatus.MODIFIED: "bold yellow",
    AppFileStatus.DELETED: "bold red",
    AppFileStatus.RENAMED: "bold cyan",
    AppFileStatus.COPIED: "bold blue",
    AppFileStatus.CONFLICTED: "bold white on red",
}


def _status_pill(status: AppFileStatus) -> Text:
    return Text(status.value, style=_STATUS_STYLE.get(status, ""))


def branch_line(result: StatusResult) -> str:
    """Describe HEAD, e.g. ``On branch main → origin/main (ahead 2, behind 1)``."""
    if result.current_branch:
        line = f"On branch {result.current_branch}"
    elif result.current_tip:
        line = f"HEAD detached at {result.current_tip[:7]}"
    else:
        line = "No commits yet"

    if result.current_upstream_branch:
        line += f" → {result.current_upstream_branch}"
    if result.ahead_behind:
        ab = result.ahead_behind
        line += f" (ahead {ab.ahead}, behind {ab.behind})"
    return line


def render(
    result: StatusResult,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print a StatusResult to the terminal using Rich."""
    console = console or Console()

    console.print(Text(branch_line(result), style="bold"))

    if result.is_clean:
        console.print("[bold green]✅ Nothing to commit, working tree clean.[/bold green]")
    else:
        table = Table(show_lines=False, title_style="bold", border_style="dim")
        table.add_column("Staged", justify="center", width=8)
        table.add_column("Status", min_width=10)
        table.add_column("Path", style="magenta")
        table.add_column("From", style="dim")

        for change in result.files:
            table.add_row(
                "[green]✓[/green]" if change.is_staged else "",
                _status_pill(change.status),
                Text(change.path),
                Text(change.old_path or ""),
            )
        console.print(table)

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: StatusResult) -> None:
    console.print()
    console.print(f"[dim]Staged:[/dim]    {len(result.staged_files)}")
    console.print(f"[dim]Unstaged:[/dim]  {len(result.unstaged_files)}")
    if result.truncated:
        console.print(
            "[bold yellow]⚠️  Output truncated: more entries exist than the configured limit.[/bold yellow]"
        )
