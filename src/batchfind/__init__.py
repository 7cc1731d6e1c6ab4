"""Discover named units below a namespace with dotted glob patterns."""

from batchfind.discovery import (
    DiscoveryConfig,
    DiscoveryError,
    NamespaceWalker,
    discover,
    match,
)

__all__ = [
    "DiscoveryConfig",
    "DiscoveryError",
    "NamespaceWalker",
    "discover",
    "match",
]
