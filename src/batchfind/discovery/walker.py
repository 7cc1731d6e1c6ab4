"""
NamespaceWalker: turns a root namespace plus include/exclude patterns into
the list of qualified names to run as one batch.
"""

from __future__ import annotations

import logging

from batchfind.discovery.errors import DiscoveryError, ResolverError
from batchfind.discovery.matcher import PatternMatcher
from batchfind.discovery.types import Child, DiscoveryConfig, NodeKind, Resolver, join_name

logger = logging.getLogger(__name__)


class NamespaceWalker:
    """
    Depth-first walk over the namespaces a `Resolver` exposes.

    Children are visited in the order the resolver lists them: a sub-namespace
    is walked as soon as it is met, a leaf is tested as soon as it is met. The
    walker keeps no state between calls to `discover`.
    """

    def __init__(self, config: DiscoveryConfig | None = None) -> None:
        self._config: DiscoveryConfig = config if config is not None else DiscoveryConfig()
        self._matcher: PatternMatcher = PatternMatcher()

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    def discover(self, root: str, resolver: Resolver) -> list[str]:
        """
        Return the qualified names below `root` that match the include pattern
        and not the exclude pattern.

        Names are prefixed with `root` (no prefix for the top level `""`).
        Any resolver failure aborts the whole call with a `ResolverError`.
        """
        found: list[str] = []
        seen: set[str] = set()
        self._walk(root, resolver, found, seen)
        logger.debug("Discovered %d name(s) under %r", len(found), root)
        if self._config.sort_names:
            found.sort()
        return found

    def _walk(self, namespace: str, resolver: Resolver, found: list[str], seen: set[str]) -> None:
        logger.debug("Entering namespace %r", namespace)
        for child in self._children(namespace, resolver):
            name = join_name(namespace, child.segment)
            if child.kind is NodeKind.NAMESPACE:
                self._walk(name, resolver, found, seen)
            elif self._matcher.accepts(self._config.include, self._config.exclude, name):
                if name not in seen:
                    seen.add(name)
                    found.append(name)
                    logger.debug("Accepted %s", name)
            else:
                logger.debug("Rejected %s", name)

    def _children(self, namespace: str, resolver: Resolver) -> list[Child]:
        try:
            return list(resolver.children(namespace))
        except DiscoveryError:
            raise
        except (OSError, ImportError) as e:
            raise ResolverError(namespace, str(e)) from e


def discover(root: str, include: str, exclude: str, resolver: Resolver) -> list[str]:
    """Discover names below `root` with explicit patterns, keeping walk order."""
    walker = NamespaceWalker(DiscoveryConfig(include=include, exclude=exclude))
    return walker.discover(root, resolver)
