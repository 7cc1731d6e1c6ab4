"""
Self-contained namespace discovery with dotted glob include and exclude patterns.

No imports from `batchfind` outside this package.

Usage::

    from batchfind.discovery import DiscoveryConfig, NamespaceWalker, PackageResolver

    config = DiscoveryConfig(include="**.test_*", exclude="**.slow.**")
    walker = NamespaceWalker(config)
    names = walker.discover("myproject.tests", PackageResolver())
"""

from batchfind.discovery.defaults import DEFAULT_EXCLUDE, DEFAULT_IGNORES, DEFAULT_INCLUDE
from batchfind.discovery.errors import DiscoveryError, NamespaceNotFoundError, ResolverError
from batchfind.discovery.matcher import PatternMatcher, match
from batchfind.discovery.resolvers import DirectoryResolver, MappingResolver, PackageResolver
from batchfind.discovery.types import Child, DiscoveryConfig, NodeKind, Resolver
from batchfind.discovery.walker import NamespaceWalker, discover

__all__ = [
    "DEFAULT_EXCLUDE",
    "DEFAULT_IGNORES",
    "DEFAULT_INCLUDE",
    "Child",
    "DirectoryResolver",
    "DiscoveryConfig",
    "DiscoveryError",
    "MappingResolver",
    "NamespaceNotFoundError",
    "NamespaceWalker",
    "NodeKind",
    "PackageResolver",
    "PatternMatcher",
    "Resolver",
    "ResolverError",
    "discover",
    "match",
]
