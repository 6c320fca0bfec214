"""Filesystem tree reader.

Walks a template directory and maps every entry onto the output directory,
producing the directory and file steps consumed by ``Generator``.
"""

from __future__ import annotations

import errno
import os
import re
from collections.abc import Iterator
from os import stat_result
from pathlib import Path
from stat import S_ISDIR
from typing import Optional

from treegen.config import Options
from treegen.models import DirectoryStep, FileStep, Mode, Step
from treegen.templates import TemplateRenderer

KEEP_PATTERN = re.compile(r"\.keep")


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def resolve_external(path: str | os.PathLike[str]) -> Path:
    """Resolve a user-supplied path against the current working directory."""
    return Path(path).expanduser().resolve()


def exists(path: str | os.PathLike[str]) -> bool:
    return os.path.exists(path)


def build_excludes(options: Options) -> list[re.Pattern[str]]:
    """Exclusion patterns for *options*.

    ``.keep`` placeholder files are skipped unless ``options.keeps`` is set.
    """
    patterns: list[re.Pattern[str]] = []
    if not options.keeps:
        patterns.append(KEEP_PATTERN)
    patterns.extend(re.compile(p) for p in options.exclude)
    return patterns


def is_excluded(relative: str, excludes: list[re.Pattern[str]]) -> bool:
    return any(pattern.search(relative) for pattern in excludes)


# ---------------------------------------------------------------------------
# Tree walking
# ---------------------------------------------------------------------------


def _walk(
    root: Path, excludes: list[re.Pattern[str]]
) -> Iterator[tuple[Path, stat_result]]:
    """Yield ``(relative_path, stats)`` pairs in pre-order, sorted by name.

    The root itself comes first as ``Path(".")``.  An excluded directory
    prunes its whole subtree.  A directory (usually a symlink) that resolves
    to one of its own ancestors is skipped entirely.
    """
    root_stats = root.stat()
    yield Path("."), root_stats

    def _children(
        directory: Path, relative: Path, ancestors: frozenset[tuple[int, int]]
    ) -> Iterator[tuple[Path, stat_result]]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            rel = relative / entry.name
            if is_excluded(rel.as_posix(), excludes):
                continue
            stats = entry.stat()
            if S_ISDIR(stats.st_mode):
                key = (stats.st_dev, stats.st_ino)
                if key in ancestors:
                    continue
                yield rel, stats
                yield from _children(Path(entry.path), rel, ancestors | {key})
            else:
                yield rel, stats

    yield from _children(root, Path("."), frozenset({(root_stats.st_dev, root_stats.st_ino)}))


def _output_name(relative: Path, suffix: str) -> Path:
    name = relative.name
    if name.endswith(suffix) and len(name) > len(suffix):
        return relative.with_name(name[: -len(suffix)])
    return relative


def get_tree(
    template_path: str | os.PathLike[str],
    output_path: Path,
    excludes: list[re.Pattern[str]],
    options: Options,
    mode: Mode,
) -> Iterator[Step]:
    """Lazily produce the filesystem steps of one template tree.

    Generate mode yields directories before their contents and compiles file
    content only when a step is pulled.  Destroy mode yields the exact
    reverse (contents before their directory, the output root last) and never
    compiles anything.

    Raises:
        FileNotFoundError: On the first pull, if the template root is not a
            directory.
    """
    root = Path(template_path)
    if not root.is_dir():
        raise FileNotFoundError(errno.ENOENT, "Template directory not found", str(root))

    if mode is Mode.DESTROY:
        entries = list(_walk(root, excludes))
        for relative, stats in reversed(entries):
            yield _make_step(relative, stats, output_path, options, None)
        return

    renderer = TemplateRenderer(root)
    for relative, stats in _walk(root, excludes):
        yield _make_step(relative, stats, output_path, options, renderer)


def _make_step(
    relative: Path,
    stats: stat_result,
    output_path: Path,
    options: Options,
    renderer: Optional[TemplateRenderer],
) -> Step:
    if S_ISDIR(stats.st_mode):
        return DirectoryStep(output_path=output_path / relative, stats=stats)

    suffix = options.template_suffix
    target = output_path / _output_name(relative, suffix)
    if renderer is None:
        return FileStep(output_path=target, stats=stats)

    if relative.name.endswith(suffix) and len(relative.name) > len(suffix):
        data = renderer.compile(relative.as_posix(), options.variables)
    else:
        data = (renderer.template_dir / relative).read_bytes()
    return FileStep(output_path=target, stats=stats, compiled_data=data)
