"""Rich-based reporting for generator runs.

Every filesystem mutation and skip decision goes through
``Reporter.log_action`` with one tag from a fixed taxonomy.  The reporter
also owns the single error sink used by the traversal boundary, the diff
renderer and the conflict help screen.
"""

from __future__ import annotations

import difflib
import os
import traceback
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Action tags
# ---------------------------------------------------------------------------

GENERATE = "generate"
DESTROY = "destroy"
CREATE = "create"
EXIST = "exist"
IDENTICAL = "identical"
SKIP = "skip"
CONFLICT = "conflict"
REMOVE = "remove"

ACTION_TAGS: tuple[str, ...] = (
    GENERATE,
    DESTROY,
    CREATE,
    EXIST,
    IDENTICAL,
    SKIP,
    CONFLICT,
    REMOVE,
)

TAG_COLORS: dict[str, str] = {
    GENERATE: "bold bright_cyan",
    DESTROY: "bold bright_cyan",
    CREATE: "green",
    EXIST: "blue",
    IDENTICAL: "blue",
    SKIP: "yellow",
    CONFLICT: "bold red",
    REMOVE: "red",
}

_TAG_WIDTH = max(len(t) for t in ACTION_TAGS) + 2


@dataclass(frozen=True)
class ReportEntry:
    """One reported action."""

    tag: str
    path: Path
    overwrite: bool = False


def _diff_lines(data: bytes) -> list[str]:
    lines = data.decode("utf-8", errors="replace").splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    return lines


def _display_path(path: Path) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        # Different drive on Windows.
        return str(path)


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


class Reporter:
    """Console sink for action tags, errors, diffs and help text.

    Attributes:
        entries: Every ``(tag, path)`` pair logged, in order.
        errors: Every exception handed to :meth:`handle_error`.
    """

    def __init__(self, output: Optional[Console] = None) -> None:
        self.console = output or console
        self.entries: list[ReportEntry] = []
        self.errors: list[BaseException] = []

    # -- Action log --------------------------------------------------------

    def log_action(self, tag: str, path: Path, *, overwrite: bool = False) -> None:
        """Print and record one action.

        ``overwrite`` marks a ``CREATE`` that replaced existing content.
        """
        if tag not in ACTION_TAGS:
            raise ValueError(f"Unknown action tag: {tag!r}")
        self.entries.append(ReportEntry(tag=tag, path=Path(path), overwrite=overwrite))

        label = "force" if overwrite else tag
        color = TAG_COLORS[tag]
        self.console.print(
            f"[{color}]{label.rjust(_TAG_WIDTH)}[/{color}]  {escape(_display_path(Path(path)))}"
        )

    def tags(self) -> list[str]:
        return [e.tag for e in self.entries]

    def paths_for(self, tag: str) -> list[Path]:
        return [e.path for e in self.entries if e.tag == tag]

    # -- Errors ------------------------------------------------------------

    def handle_error(self, exc: BaseException, *, show_traceback: bool = False) -> None:
        """Report a failed run."""
        self.errors.append(exc)
        self.console.print(
            f"[bold red]Error:[/bold red] {escape(type(exc).__name__)}: {escape(str(exc))}"
        )
        if show_traceback:
            tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            self.console.print(f"[dim]{escape(tb)}[/dim]")

    def interrupted(self) -> None:
        self.console.print("[bold yellow]Aborted, remaining steps were not run.[/bold yellow]")

    # -- Conflict helpers --------------------------------------------------

    def show_diff(self, old: bytes, new: bytes, path: Path) -> None:
        """Render a unified diff between the existing and the new content."""
        old_lines = _diff_lines(old)
        new_lines = _diff_lines(new)
        diff = "".join(
            difflib.unified_diff(
                old_lines,
                new_lines,
                fromfile=f"{_display_path(path)} (existing)",
                tofile=f"{_display_path(path)} (new)",
            )
        )
        if not diff:
            self.console.print("[dim]No textual differences.[/dim]")
            return
        self.console.print(Syntax(diff, "diff", theme="ansi_dark", word_wrap=True))

    def show_help(self, menu: dict[str, str]) -> None:
        for key, description in menu.items():
            self.console.print(f"[bold]{escape(key).rjust(8)}[/bold] - {escape(description)}")

    # -- Summary -----------------------------------------------------------

    def summary(self, title: str = "Summary") -> Table:
        """Build a table of per-tag counts for the logged actions."""
        counts = Counter(e.tag for e in self.entries)
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Action", style="dim", no_wrap=True)
        table.add_column("Count", justify="right")
        for tag in ACTION_TAGS:
            if counts.get(tag):
                table.add_row(tag, str(counts[tag]))
        if self.errors:
            table.add_row("error", str(len(self.errors)), style="red")
        return table
