"""Jinja2 compilation of template files.

Provides the TemplateRenderer class which loads templates from a template
root directory and compiles them into the final bytes written to the output
tree.  Undefined variables raise instead of rendering as empty strings.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Compiles Jinja2 templates found under *template_dir*."""

    def __init__(self, template_dir: str | Path) -> None:
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: POSIX path relative to the template directory (e.g.
                ``"app/main.py.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    def compile(self, template_path: str, context: dict[str, Any]) -> bytes:
        """Render *template_path* and encode the result as UTF-8."""
        return self.render(template_path, context).encode("utf-8")


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

_WORD = re.compile(r"[A-Za-z0-9]+")


def _words(value: str) -> list[str]:
    return _WORD.findall(value)


def _slugify_filter(value: str) -> str:
    """``"My App!"`` -> ``"my-app"``."""
    return "-".join(_words(value)).lower()


def _pascal_case_filter(value: str) -> str:
    """``"my-app"`` -> ``"MyApp"``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(value))
