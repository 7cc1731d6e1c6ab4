"""Configuration and tree types for namespace discovery."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from batchfind.discovery.defaults import DEFAULT_EXCLUDE, DEFAULT_INCLUDE


@dataclass(frozen=True)
class DiscoveryConfig:
    """
    Patterns and ordering for one discovery call.

    `include` defaults to `**.*Test`. `exclude=""` excludes nothing.
    `sort_names=False` keeps the order in which the walk met each name.
    """

    include: str = DEFAULT_INCLUDE
    exclude: str = DEFAULT_EXCLUDE
    sort_names: bool = False


class NodeKind(Enum):
    NAMESPACE = "namespace"
    LEAF = "leaf"


@dataclass(frozen=True)
class Child:
    """One immediate child of a namespace, named by its own segment only."""

    kind: NodeKind
    segment: str

    @classmethod
    def namespace(cls, segment: str) -> Child:
        return cls(NodeKind.NAMESPACE, segment)

    @classmethod
    def leaf(cls, segment: str) -> Child:
        return cls(NodeKind.LEAF, segment)


class Resolver(Protocol):
    """
    Lists the immediate children of a namespace, in a stable order.

    `namespace` is a qualified name, or `""` for the top level. Implementations
    raise `NamespaceNotFoundError` for a namespace they do not know and
    `ResolverError` for any other listing failure.
    """

    def children(self, namespace: str) -> Sequence[Child]: ...


def join_name(prefix: str, segment: str) -> str:
    """Append a segment to a qualified name. The empty prefix is the top level."""
    return f"{prefix}.{segment}" if prefix else segment
