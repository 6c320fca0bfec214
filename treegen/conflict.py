"""Interactive resolution of file conflicts.

A conflict is a generated file whose target already exists with different
content.  The resolver asks the operator what to do and loops on the
informational answers (diff, help) until a decision is made.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from rich.markup import escape
from rich.prompt import Prompt

from treegen.models import CONFLICT_MENU, ConflictChoice, FileStep
from treegen.reporting import Reporter

# Menu letters in display order; the first one is the default.
MENU_KEYS: list[str] = ["Y", "n", "a", "q", "d", "h"]

TERMINAL_CHOICES = frozenset(
    {
        ConflictChoice.OVERWRITE,
        ConflictChoice.OVERWRITE_ALL,
        ConflictChoice.SKIP,
        ConflictChoice.QUIT,
    }
)


class PromptFunc(Protocol):
    def __call__(self, message: str, *, choices: list[str], default: str) -> str: ...


def rich_prompt(message: str, *, choices: list[str], default: str) -> str:
    """Ask on the terminal; invalid answers are re-prompted by Rich."""
    return Prompt.ask(
        message,
        choices=choices,
        default=default,
        case_sensitive=False,
        show_choices=False,
        show_default=False,
    )


class ConflictResolver:
    """Decides the fate of one conflicting file.

    Args:
        reporter: Sink for the diff and help screens.
        prompt: Callable returning one of the menu letters.  Defaults to a
            Rich prompt on the terminal.
    """

    def __init__(
        self,
        reporter: Reporter,
        prompt: Optional[PromptFunc | Callable[..., str]] = None,
    ) -> None:
        self.reporter = reporter
        self.prompt = prompt or rich_prompt

    def ask(self, step: FileStep) -> ConflictChoice:
        message = (
            f"Overwrite [bold]{escape(str(step.output_path))}[/bold]? "
            f'(enter "h" for help) \\[{"".join(MENU_KEYS)}]'
        )
        answer = self.prompt(message, choices=MENU_KEYS, default=MENU_KEYS[0])
        return ConflictChoice((answer or MENU_KEYS[0]).strip().lower())

    def resolve(self, step: FileStep, existing: bytes) -> ConflictChoice:
        """Prompt until a terminal choice is made and return it.

        ``DIFF`` and ``HELP`` are handled here and never returned.
        """
        while True:
            choice = self.ask(step)
            if choice in TERMINAL_CHOICES:
                return choice
            if choice is ConflictChoice.DIFF:
                self.reporter.show_diff(existing, step.compiled_data or b"", step.output_path)
            else:
                self.reporter.show_help(
                    {key: CONFLICT_MENU[ConflictChoice(key.lower())] for key in MENU_KEYS}
                )
