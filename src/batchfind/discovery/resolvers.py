"""
Bundled resolvers: an in-memory tree, directory trees, and Python packages.

Each resolver lists the immediate children of one namespace at a time. None of
them cache listings between calls; `DirectoryResolver` only caches parsed
`.gitignore` files.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import pathspec

from batchfind.discovery.defaults import DEFAULT_IGNORES, DEFAULT_SUFFIXES
from batchfind.discovery.errors import NamespaceNotFoundError, ResolverError
from batchfind.discovery.gitignore import compile_ignores, is_ignored, load_gitignore
from batchfind.discovery.types import Child, NodeKind

logger = logging.getLogger(__name__)


def _valid_segment(segment: str) -> bool:
    return bool(segment) and "." not in segment


class MappingResolver:
    """
    Resolver over a plain mapping of qualified namespace name to children.

    Use `""` as the key for the top level. Handy for tests and for trees
    assembled by hand.
    """

    def __init__(self, tree: Mapping[str, Iterable[Child]]) -> None:
        self._tree: dict[str, tuple[Child, ...]] = {}
        for namespace, children in tree.items():
            listed = tuple(children)
            for child in listed:
                if not _valid_segment(child.segment):
                    raise ValueError(
                        f"Invalid segment {child.segment!r} under namespace {namespace!r}"
                    )
            self._tree[namespace] = listed

    def children(self, namespace: str) -> Sequence[Child]:
        try:
            return self._tree[namespace]
        except KeyError:
            raise NamespaceNotFoundError(namespace) from None


class DirectoryResolver:
    """
    Maps directory trees onto namespaces.

    Namespace `a.b` is the directory `a/b` below each base directory. A
    namespace present below several bases is merged, in base order.
    Subdirectories are namespaces and files ending in one of `suffixes` are
    leaves named by their stem. Symlinked directories are not followed.

    With `respect_gitignore`, every `.gitignore` from the base directory down to
    the listed directory applies, each relative to its own directory.
    """

    def __init__(
        self,
        base_dirs: Sequence[str | Path],
        suffixes: Sequence[str] = DEFAULT_SUFFIXES,
        respect_gitignore: bool = True,
        ignore: Sequence[str] | None = None,
    ) -> None:
        if not base_dirs:
            raise ValueError("DirectoryResolver needs at least one base directory")
        self._bases: list[Path] = [Path(d) for d in base_dirs]
        self._suffixes: tuple[str, ...] = tuple(suffixes)
        self._respect_gitignore: bool = respect_gitignore
        self._ignore_spec: pathspec.PathSpec | None = compile_ignores(
            DEFAULT_IGNORES if ignore is None else ignore
        )
        # Cache gitignore specs per directory to avoid re-reading from disk.
        self._gitignore_cache: dict[Path, pathspec.PathSpec | None] = {}

    def children(self, namespace: str) -> Sequence[Child]:
        parts = namespace.split(".") if namespace else []
        listed = [(base, base.joinpath(*parts)) for base in self._bases]
        existing = [(base, d) for base, d in listed if d.is_dir()]
        if not existing:
            raise NamespaceNotFoundError(namespace)

        result: list[Child] = []
        for base, directory in existing:
            try:
                result.extend(self._list_directory(directory, self._gitignore_chain(base, parts)))
            except OSError as e:
                raise ResolverError(namespace, str(e)) from e
            except UnicodeDecodeError as e:
                raise ResolverError(namespace, f"unreadable .gitignore: {e}") from e
        return result

    def _get_gitignore(self, directory: Path) -> pathspec.PathSpec | None:
        """Load and cache gitignore for a directory."""
        if directory not in self._gitignore_cache:
            self._gitignore_cache[directory] = load_gitignore(directory)
        return self._gitignore_cache[directory]

    def _gitignore_chain(
        self, base: Path, parts: Sequence[str]
    ) -> list[tuple[Path, pathspec.PathSpec]]:
        """Collect `(directory, spec)` for each gitignore from `base` down to `base/parts`."""
        if not self._respect_gitignore:
            return []
        chain: list[tuple[Path, pathspec.PathSpec]] = []
        for depth in range(len(parts) + 1):
            current = base.joinpath(*parts[:depth])
            spec = self._get_gitignore(current)
            if spec is not None:
                chain.append((current, spec))
        return chain

    def _list_directory(
        self, directory: Path, gitignores: list[tuple[Path, pathspec.PathSpec]]
    ) -> Iterable[Child]:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            is_dir = entry.is_dir()
            if is_dir and entry.is_symlink():
                logger.debug("Not following symlinked directory %s", entry)
                continue
            if self._is_ignored(entry, is_dir, gitignores):
                logger.debug("Ignoring %s", entry)
                continue

            if is_dir:
                kind, segment = NodeKind.NAMESPACE, entry.name
            elif entry.suffix in self._suffixes:
                kind, segment = NodeKind.LEAF, entry.name[: -len(entry.suffix)]
            else:
                continue

            if not _valid_segment(segment):
                logger.debug("Skipping %s: %r is not a valid name segment", entry, segment)
                continue
            yield Child(kind, segment)

    def _is_ignored(
        self, entry: Path, is_dir: bool, gitignores: list[tuple[Path, pathspec.PathSpec]]
    ) -> bool:
        if is_ignored(self._ignore_spec, entry.name, is_dir):
            return True
        return any(
            is_ignored(spec, entry.relative_to(root).as_posix(), is_dir)
            for root, spec in gitignores
        )


class PackageResolver:
    """
    Maps importable Python packages onto namespaces.

    Listing a namespace imports that package (never its leaf modules).
    Sub-packages are namespaces and plain modules are leaves. The top level
    `""` lists everything importable from `sys.path`.

    Children come from `pkgutil.iter_modules`, which does not report
    directories without an `__init__.py`, so implicit namespace sub-packages
    are not walked. Use `DirectoryResolver` for such trees.
    """

    def children(self, namespace: str) -> Sequence[Child]:
        if not namespace:
            modules = pkgutil.iter_modules()
        else:
            modules = pkgutil.iter_modules(self._package_path(namespace))

        result: list[Child] = []
        seen: set[str] = set()
        for info in modules:
            # The same name can show up once per sys.path entry; the first one wins on import.
            if info.name in seen:
                continue
            seen.add(info.name)
            kind = NodeKind.NAMESPACE if info.ispkg else NodeKind.LEAF
            result.append(Child(kind, info.name))
        return result

    def _package_path(self, namespace: str) -> list[str]:
        try:
            module = importlib.import_module(namespace)
        except ModuleNotFoundError as e:
            # A missing dependency inside an existing package is a failure of that package.
            if e.name is not None and (namespace == e.name or namespace.startswith(e.name + ".")):
                raise NamespaceNotFoundError(namespace) from e
            raise ResolverError(namespace, f"import failed: {e}") from e
        except Exception as e:
            # Package code runs on import and may raise anything, e.g. unittest.SkipTest.
            raise ResolverError(namespace, f"import failed: {e!r}") from e

        path = getattr(module, "__path__", None)
        if path is None:
            logger.debug("%s is a module, not a package", namespace)
            raise NamespaceNotFoundError(namespace)
        return list(path)
