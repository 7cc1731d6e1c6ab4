"""Errors raised by namespace discovery."""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for errors that abort a discovery call."""


class ResolverError(DiscoveryError):
    """A resolver could not list the children of a namespace."""

    def __init__(self, namespace: str, message: str) -> None:
        self.namespace: str = namespace
        label = namespace or "<top level>"
        super().__init__(f"Cannot list namespace {label!r}: {message}")


class NamespaceNotFoundError(ResolverError):
    """The namespace does not exist for this resolver."""

    def __init__(self, namespace: str) -> None:
        super().__init__(namespace, "namespace not found")
