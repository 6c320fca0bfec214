"""Command line entry point.

Usage::

    python -m treegen generate templates/app ./out --var name=demo
    python -m treegen destroy templates/app ./out
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from treegen.config import GeneratorError, Options, load_variables
from treegen.generator import Generator
from treegen.models import Mode
from treegen.reporting import Reporter, console


def _parse_var(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise GeneratorError(f"Invalid --var {raw!r}, expected KEY=VALUE")
    return key.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treegen",
        description="Render a directory template, or remove what it generated",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  treegen generate templates/app ./out --var name=demo\n"
            "  treegen generate templates/app ./out --vars vars.yml --keeps\n"
            "  treegen destroy templates/app ./out\n"
        ),
    )
    parser.add_argument("mode", choices=[m.value for m in Mode], help="What to do")
    parser.add_argument("template", help="Template directory")
    parser.add_argument("output", help="Output directory")
    parser.add_argument(
        "--keeps",
        action="store_true",
        default=None,
        help="Copy .keep placeholder files instead of skipping them",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Regular expression of template paths to skip (repeatable)",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template variable (repeatable, overrides --vars)",
    )
    parser.add_argument(
        "--vars",
        default=None,
        metavar="FILE",
        help="YAML or JSON file with template variables",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        default=None,
        help="Print the full traceback when the run fails",
    )
    return parser


def build_options(args: argparse.Namespace) -> Options:
    """Merge environment defaults with command line arguments."""
    base = Options.from_env()

    variables: dict[str, Any] = {}
    if args.vars:
        variables.update(load_variables(args.vars))
    variables.update(_parse_var(raw) for raw in args.var)

    update: dict[str, Any] = {"variables": {**base.variables, **variables}}
    if args.keeps is not None:
        update["keeps"] = args.keeps
    if args.exclude:
        update["exclude"] = base.exclude + tuple(args.exclude)
    if args.traceback is not None:
        update["show_traceback"] = args.traceback
    return Options.model_validate({**base.model_dump(), **update})


def run(argv: Optional[Sequence[str]] = None, reporter: Optional[Reporter] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        options = build_options(args)
    except (GeneratorError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 1

    if not Path(args.template).is_dir():
        console.print(f"[bold red]Error:[/bold red] Template directory not found: {args.template}")
        return 1

    reporter = reporter or Reporter()
    generator = Generator(options, args.template, args.output, reporter=reporter)
    if args.mode == Mode.GENERATE.value:
        generator.generate()
    else:
        generator.destroy()

    reporter.console.print()
    reporter.console.print(reporter.summary(title=f"treegen {args.mode}"))
    return 1 if reporter.errors else 0


def main() -> None:
    """Console script entry point."""
    sys.exit(run())
