"""
Storage Port Interfaces

Abstract base class defining the storage backend contract for recordgate.
A backend turns a resource location into a raw, single-pass byte stream.

These ports follow the hexagonal architecture pattern:
- Reader code depends only on this interface
- Adapters (local filesystem, in-memory, SQLAlchemy, Redis) implement it
- The backend is injected into the resource reader via dependency inversion

Backends never read bytes eagerly on behalf of the caller beyond what their
medium requires; the returned stream is owned (and closed) by the caller.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO
from urllib.parse import SplitResult


# =============================================================================
# Storage Backend
# =============================================================================

class StorageBackend(ABC):
    """
    Storage interface for opening raw resource streams.

    Resource identifiers arrive in two forms: fully-qualified URIs and bare
    path-like strings. The resource reader decides which form applies and
    calls the matching method.
    """

    @abstractmethod
    def open_uri(self, uri: SplitResult) -> BinaryIO:
        """
        Open a resource addressed by a parsed URI.

        Args:
            uri: The identifier parsed as a URI

        Returns:
            A readable binary stream positioned at the start of the resource

        Raises:
            OSError: If the resource cannot be opened
            StorageError: If the backend cannot serve this location
        """
        ...

    @abstractmethod
    def open_path(self, path: str) -> BinaryIO:
        """
        Open a resource addressed by a plain path string.

        Args:
            path: The identifier taken verbatim

        Returns:
            A readable binary stream positioned at the start of the resource

        Raises:
            OSError: If the resource cannot be opened
            StorageError: If the backend cannot serve this location
        """
        ...

    def close(self) -> None:
        """
        Release backend connections.

        Called during shutdown.
        """
        # Implementations should override to dispose engines, clients, etc.
        pass


# =============================================================================
# Exceptions
# =============================================================================

class StorageError(Exception):
    """Base exception for storage errors."""
    pass


class ResourceNotFoundError(StorageError):
    """No resource stored under the requested location."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Resource not found: {location}")


class UnsupportedSchemeError(StorageError):
    """The backend cannot open URIs with this scheme."""

    def __init__(self, scheme: str):
        self.scheme = scheme
        super().__init__(f"No storage available for scheme: {scheme}")
