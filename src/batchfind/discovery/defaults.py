"""
Default patterns for namespace discovery.

Patterns use the dotted segment glob dialect understood by
`batchfind.discovery.matcher`. Ignore patterns use gitignore syntax and apply
only to the directory resolver.
"""

from __future__ import annotations

DEFAULT_INCLUDE: str = "**.*Test"

# The empty pattern only matches the empty name, so it excludes nothing.
DEFAULT_EXCLUDE: str = ""

DEFAULT_SUFFIXES: tuple[str, ...] = (".py",)

# Filesystem entries that never name a namespace or a leaf.
DEFAULT_IGNORES: list[str] = [
    ".*",
    "__pycache__/",
    "__init__.py",
    "__main__.py",
    "*.egg-info/",
    "build/",
    "dist/",
    "node_modules/",
]
