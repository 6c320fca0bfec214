"""Template generator: tree building and execution.

A ``Generator`` owns an optional template directory, an output directory,
an ordered registry of actions and an ordered list of dependent generators.
``generate()`` renders the template into the output directory; ``destroy()``
removes what a previous ``generate()`` created.

Step ordering across a generator tree::

    generate:  own files -> dependents (in order) -> own actions
    destroy:   own actions -> dependents (in order) -> own files

Quick usage::

    from treegen import Generator, Mode, Options

    gen = Generator(Options(variables={"name": "demo"}), "templates/app", "out")
    gen.add_action(lambda mode: print("done"), [Mode.GENERATE])
    gen.generate()
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from treegen.config import GeneratorError, Options
from treegen.conflict import ConflictResolver, PromptFunc
from treegen.cursor import StepCursor, UserInterrupt
from treegen.models import (
    Action,
    ActionCallback,
    ActionStep,
    ConflictChoice,
    DirectoryStep,
    FileStep,
    Mode,
    Step,
)
from treegen.reporting import (
    CONFLICT,
    CREATE,
    DESTROY,
    EXIST,
    GENERATE,
    IDENTICAL,
    REMOVE,
    SKIP,
    Reporter,
)
from treegen.tree import build_excludes, exists, get_tree, resolve_external


@dataclass
class TraversalSession:
    """State owned by one ``generate()`` / ``destroy()`` call."""

    cursor: StepCursor[Step]
    overwrite_all: bool = False


class Generator:
    """Renders (or removes) one template tree plus its dependents.

    Args:
        options: Immutable generator options.
        template_path: Template directory.  ``None`` means the generator
            contributes no filesystem steps, only actions and dependents.
        output_dir: Output directory, resolved against the current working
            directory.  Required when *template_path* is given.
        reporter: Action/error sink.  Defaults to a console reporter.
        prompt: Conflict prompt; defaults to an interactive Rich prompt.
    """

    def __init__(
        self,
        options: Options,
        template_path: str | os.PathLike[str] | None = None,
        output_dir: str | os.PathLike[str] | None = None,
        *,
        reporter: Optional[Reporter] = None,
        prompt: Optional[PromptFunc] = None,
    ) -> None:
        if template_path is not None and output_dir is None:
            raise GeneratorError("A template path requires an output directory")

        self.options = options
        self.template_path: Optional[Path] = (
            Path(template_path) if template_path is not None else None
        )
        self.output_path: Optional[Path] = (
            resolve_external(output_dir) if output_dir is not None else None
        )
        self.excludes = build_excludes(options)

        self.actions: list[Action] = []
        self.dependent_generators: list[Generator] = []

        self.reporter = reporter or Reporter()
        self.resolver = ConflictResolver(self.reporter, prompt)

    def __repr__(self) -> str:
        return (
            f"Generator(template_path={self.template_path!s}, "
            f"output_path={self.output_path!s})"
        )

    # -- Registration ------------------------------------------------------

    def add_action(
        self,
        callback: ActionCallback,
        modes: Iterable[Mode | str],
        name: str = "",
    ) -> Action:
        """Register *callback* to run in each of *modes*."""
        mode_set = frozenset(Mode(m) for m in modes)
        if not mode_set:
            raise GeneratorError("An action needs at least one mode")
        action = Action(
            callback=callback,
            modes=mode_set,
            name=name or getattr(callback, "__name__", "action"),
        )
        self.actions.append(action)
        return action

    def add_dependent(self, generator: "Generator") -> "Generator":
        """Compose *generator* into this one's traversal.

        Raises:
            GeneratorError: If the registration would create a cycle or add
                the same generator twice.
        """
        if generator is self or self in generator.walk():
            raise GeneratorError(f"Adding {generator!r} would create a cycle")
        if any(generator is g for g in self.walk()):
            raise GeneratorError(f"{generator!r} is already part of this tree")
        self.dependent_generators.append(generator)
        return generator

    def walk(self) -> Iterator["Generator"]:
        """Yield this generator and all its dependents, depth first."""
        yield self
        for generator in self.dependent_generators:
            yield from generator.walk()

    # -- Tree building -----------------------------------------------------

    def build_tree(self, mode: Mode) -> Iterator[Step]:
        """Lazily produce the ordered step sequence for *mode*."""
        if self.template_path is not None:
            assert self.output_path is not None  # required by __init__ with a template
            files: Iterable[Step] = get_tree(
                self.template_path,
                self.output_path,
                self.excludes,
                self.options,
                mode,
            )
        else:
            files = ()

        actions = [ActionStep.from_action(a) for a in self.actions if a.applies_to(mode)]

        yield from (files if mode is Mode.GENERATE else actions)
        for generator in self.dependent_generators:
            yield from generator.build_tree(mode)
        yield from (actions if mode is Mode.GENERATE else files)

    # -- Execution ---------------------------------------------------------

    def generate(self) -> None:
        """Render the whole tree; errors are reported, never raised."""
        self._run(Mode.GENERATE)

    def destroy(self) -> None:
        """Remove everything the tree would generate; errors are reported."""
        self._run(Mode.DESTROY)

    def _run(self, mode: Mode) -> None:
        session = TraversalSession(cursor=StepCursor(self.build_tree(mode)))
        label = GENERATE if mode is Mode.GENERATE else DESTROY
        self.reporter.log_action(label, self.output_path or Path.cwd())
        try:
            for step in session.cursor:
                if mode is Mode.GENERATE:
                    self._generate_step(step, session)
                else:
                    self._destroy_step(step)
        except UserInterrupt:
            self.reporter.interrupted()
        except Exception as exc:  # noqa: BLE001
            self.reporter.handle_error(exc, show_traceback=self.options.show_traceback)
        finally:
            session.cursor.cancel()

    def _generate_step(self, step: Step, session: TraversalSession) -> None:
        if isinstance(step, ActionStep):
            step.run(Mode.GENERATE)
        elif step.is_directory:
            self.generate_directory(step)
        else:
            self.generate_file(step, session)

    def _destroy_step(self, step: Step) -> None:
        if isinstance(step, ActionStep):
            step.run(Mode.DESTROY)
            return
        # Already gone.
        if not exists(step.output_path):
            return
        if step.is_directory:
            self.destroy_directory(step.output_path)
        else:
            self.destroy_file(step.output_path)

    # -- Generate primitives -----------------------------------------------

    def generate_directory(self, step: DirectoryStep) -> None:
        if exists(step.output_path):
            self.reporter.log_action(EXIST, step.output_path)
        else:
            step.output_path.mkdir(parents=True, exist_ok=True)
            self.reporter.log_action(CREATE, step.output_path)

    def generate_file(self, step: FileStep, session: TraversalSession) -> None:
        if not exists(step.output_path):
            self.write_file(step)
            return

        existing = step.output_path.read_bytes()
        if existing == step.compiled_data:
            self.reporter.log_action(IDENTICAL, step.output_path)
        elif session.overwrite_all:
            self.write_file(step, overwrite=True)
        else:
            self.reporter.log_action(CONFLICT, step.output_path)
            self.resolve_conflict(step, existing, session)

    def resolve_conflict(
        self, step: FileStep, existing: bytes, session: TraversalSession
    ) -> None:
        choice = self.resolver.resolve(step, existing)
        if choice is ConflictChoice.OVERWRITE_ALL:
            session.overwrite_all = True
            self.write_file(step, overwrite=True)
        elif choice is ConflictChoice.OVERWRITE:
            self.write_file(step, overwrite=True)
        elif choice is ConflictChoice.SKIP:
            self.reporter.log_action(SKIP, step.output_path)
        elif choice is ConflictChoice.QUIT:
            session.cursor.cancel(UserInterrupt())

    def write_file(self, step: FileStep, *, overwrite: bool = False) -> None:
        """Write the compiled content; refuses to clobber unless *overwrite*."""
        step.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(step.output_path, "wb" if overwrite else "xb") as fh:
            fh.write(step.compiled_data or b"")
        self.reporter.log_action(CREATE, step.output_path, overwrite=overwrite)

    # -- Destroy primitives ------------------------------------------------

    def destroy_directory(self, path: Path) -> None:
        if any(path.iterdir()):
            # Holds files we did not generate.
            self.reporter.log_action(SKIP, path)
        else:
            path.rmdir()
            self.reporter.log_action(REMOVE, path)

    def destroy_file(self, path: Path) -> None:
        path.unlink()
        self.reporter.log_action(REMOVE, path)
