"""Shared pytest fixtures for the treegen test suite.

Provides reusable fixtures for:
- Template trees built under ``tmp_path``
- A scripted conflict prompt that records what it was asked
- A reporter writing to an in-memory console
- Generator construction with the above wired in
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from rich.console import Console

from treegen import Generator, Options, Reporter


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

def write_tree(root: Path, spec: dict[str, Any]) -> Path:
    """Create files and directories under *root* from a nested dict.

    String or bytes values become files; dict values become directories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in spec.items():
        path = root / name
        if isinstance(value, dict):
            write_tree(path, value)
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_text(value, encoding="utf-8")
    return root


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a template directory under ``tmp_path/templates``."""

    def factory(spec: dict[str, Any], name: str = "template") -> Path:
        return write_tree(tmp_path / "templates" / name, spec)

    return factory


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Output location (not created)."""
    return tmp_path / "out"


# ---------------------------------------------------------------------------
# Prompt & reporter
# ---------------------------------------------------------------------------

class ScriptedPrompt:
    """Conflict prompt answering from a fixed script.

    An empty answer returns the default, like a user pressing enter.
    """

    def __init__(self, answers: Optional[list[str]] = None) -> None:
        self.answers = list(answers or [])
        self.messages: list[str] = []

    def __call__(self, message: str, *, choices: list[str], default: str) -> str:
        self.messages.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        return answer or default

    @property
    def calls(self) -> int:
        return len(self.messages)


@pytest.fixture
def prompt() -> ScriptedPrompt:
    return ScriptedPrompt()


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(console_buffer: io.StringIO) -> Reporter:
    """Reporter printing to an in-memory, colourless console."""
    return Reporter(Console(file=console_buffer, width=200, color_system=None))


@pytest.fixture
def make_generator(
    reporter: Reporter, prompt: ScriptedPrompt
) -> Callable[..., Generator]:
    """Factory for generators sharing the test reporter and prompt."""

    def factory(
        template: Optional[Path] = None,
        output: Optional[Path] = None,
        options: Optional[Options] = None,
    ) -> Generator:
        return Generator(
            options or Options(),
            template,
            output,
            reporter=reporter,
            prompt=prompt,
        )

    return factory
