"""Ignore rules for the directory resolver, using pathspec."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pathspec


def compile_ignores(lines: Iterable[str]) -> pathspec.PathSpec | None:
    """Compile gitignore-style lines, dropping blanks and comments. `None` if nothing is left."""
    lines = [line for line in lines if line.strip() and not line.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """
    Read `.gitignore` in the given directory and return a compiled `PathSpec`,
    or `None` if the file doesn't exist or is empty.

    Raises `UnicodeDecodeError` for a file that is not UTF-8.
    """
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    return compile_ignores(gitignore.read_text(encoding="utf-8").splitlines())


def is_ignored(spec: pathspec.PathSpec | None, rel_path: str, is_dir: bool) -> bool:
    """
    Check one path, relative to the directory the rules came from, in POSIX form.
    Directories are tested with a trailing `/`.
    """
    if spec is None:
        return False
    return spec.match_file(rel_path + "/" if is_dir else rel_path)
