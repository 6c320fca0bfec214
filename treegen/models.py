"""Step model for template traversal.

A traversal is a flat, ordered sequence of steps.  Each step is one of:

- ``DirectoryStep`` -- a directory to create (generate) or remove (destroy)
- ``FileStep``      -- a file to write (generate) or unlink (destroy)
- ``ActionStep``    -- a caller-supplied callback run at a fixed point
"""

from __future__ import annotations

import stat as stat_module
from dataclasses import dataclass, field
from enum import Enum
from os import stat_result
from pathlib import Path
from typing import Callable, Optional, Union


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Mode(str, Enum):
    """Traversal mode."""
    GENERATE = "generate"
    DESTROY = "destroy"


class ConflictChoice(str, Enum):
    """Answers accepted by the conflict prompt, keyed by their menu letter."""
    OVERWRITE = "y"
    SKIP = "n"
    OVERWRITE_ALL = "a"
    QUIT = "q"
    DIFF = "d"
    HELP = "h"


CONFLICT_MENU: dict[ConflictChoice, str] = {
    ConflictChoice.OVERWRITE: "yes, overwrite",
    ConflictChoice.SKIP: "no, do not overwrite",
    ConflictChoice.OVERWRITE_ALL: "all, overwrite this and all others",
    ConflictChoice.QUIT: "quit, do not overwrite",
    ConflictChoice.DIFF: "diff, show the differences between the old and the new",
    ConflictChoice.HELP: "help, show this help",
}


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

ActionCallback = Callable[[Mode], None]


@dataclass(frozen=True)
class Action:
    """A registered callback and the modes it runs under."""

    callback: ActionCallback
    modes: frozenset[Mode]
    name: str = ""

    def applies_to(self, mode: Mode) -> bool:
        return mode in self.modes


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectoryStep:
    """A template directory mapped to its absolute output path."""

    output_path: Path
    stats: stat_result

    @property
    def is_directory(self) -> bool:
        return stat_module.S_ISDIR(self.stats.st_mode)


@dataclass(frozen=True)
class FileStep:
    """A template file mapped to its absolute output path.

    ``compiled_data`` holds the final bytes to write.  It is ``None`` for
    steps produced in destroy mode, where the content is never needed.
    """

    output_path: Path
    stats: stat_result
    compiled_data: Optional[bytes] = field(default=None, repr=False)

    @property
    def is_directory(self) -> bool:
        return stat_module.S_ISDIR(self.stats.st_mode)


@dataclass(frozen=True)
class ActionStep:
    """An action selected for the current traversal mode."""

    name: str
    modes: frozenset[Mode]
    callback: ActionCallback

    @classmethod
    def from_action(cls, action: Action) -> "ActionStep":
        return cls(name=action.name, modes=action.modes, callback=action.callback)

    def run(self, mode: Mode) -> None:
        self.callback(mode)


Step = Union[DirectoryStep, FileStep, ActionStep]
