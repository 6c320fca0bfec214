"""treegen configuration.

``Options`` is the immutable record handed to every ``Generator``.  The
traversal core only reads it to decide exclusions; the remaining fields feed
the template renderer and the error reporter.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


class GeneratorError(Exception):
    """Raised for invalid generator composition or unusable configuration."""


_TRUTHY = {"1", "true", "yes", "on"}


class Options(BaseModel):
    """Generator options.

    Instances are frozen: use :meth:`with_variables` or ``model_copy`` to
    derive a modified copy.
    """

    model_config = ConfigDict(frozen=True)

    keeps: bool = Field(
        default=False,
        description="Copy ``.keep`` placeholder files instead of skipping them",
    )
    variables: dict[str, Any] = Field(
        default_factory=dict,
        description="Context passed to every Jinja2 template",
    )
    exclude: tuple[str, ...] = Field(
        default=(),
        description="Extra regular expressions matched against template-relative paths",
    )
    template_suffix: str = Field(
        default=".j2",
        min_length=1,
        description="Files ending with this suffix are rendered and written without it",
    )
    show_traceback: bool = Field(
        default=False,
        description="Print the full traceback when a run fails",
    )

    def with_variables(self, variables: dict[str, Any]) -> "Options":
        """Return a copy whose variables are merged with *variables*."""
        return self.model_copy(update={"variables": {**self.variables, **variables}})

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the options to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Options":
        """Load previously saved options from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Options":
        """Build ``Options`` from environment variables.

        Recognised variables (all optional):
            TREEGEN_KEEPS, TREEGEN_EXCLUDE (comma separated),
            TREEGEN_SHOW_TRACEBACK.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("TREEGEN_KEEPS"):
            kwargs["keeps"] = os.environ["TREEGEN_KEEPS"].strip().lower() in _TRUTHY
        if os.environ.get("TREEGEN_EXCLUDE"):
            kwargs["exclude"] = tuple(
                p.strip() for p in os.environ["TREEGEN_EXCLUDE"].split(",") if p.strip()
            )
        if os.environ.get("TREEGEN_SHOW_TRACEBACK"):
            kwargs["show_traceback"] = (
                os.environ["TREEGEN_SHOW_TRACEBACK"].strip().lower() in _TRUTHY
            )
        return cls(**kwargs)


def load_variables(path: str | Path) -> dict[str, Any]:
    """Read a YAML (or JSON) mapping of template variables.

    An empty document yields an empty mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        GeneratorError: If the document is not valid YAML or not a mapping.
    """
    raw = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise GeneratorError(f"Cannot parse variables file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GeneratorError(
            f"Variables file must contain a mapping, got {type(data).__name__}: {path}"
        )
    return data
