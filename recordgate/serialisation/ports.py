"""
Serialiser Port Interfaces

A serialiser converts a resource's raw bytes into a lazy sequence of typed
records and back. Readers select a serialiser by the resource's data flavour.

Thread-safety: a registered serialiser is shared by all concurrent reads of
its flavour, so implementations must not keep per-stream state on self.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import BinaryIO, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DataFlavour:
    """
    Classification key selecting a serialiser.

    Combines the resource's data type (what a record is) with its serialised
    format (how records are encoded).
    """
    data_type: str
    serialised_format: str

    def __str__(self) -> str:
        return f"{self.data_type}/{self.serialised_format}"


class Serialiser(ABC, Generic[T]):
    """
    Interface for record encodings.
    """

    @abstractmethod
    def deserialise(self, stream: BinaryIO) -> Iterator[T]:
        """
        Lazily decode records from a byte stream.

        Records must be pulled from the stream as the iterator advances,
        not read up front.

        Args:
            stream: Readable binary stream, owned by the caller

        Returns:
            Iterator of records in stream order
        """
        ...

    @abstractmethod
    def serialise(self, records: Iterable[T], output: BinaryIO) -> None:
        """
        Encode records onto an output sink, consuming the iterable once.

        Args:
            records: Records to encode, in order
            output: Writable binary sink, owned by the caller
        """
        ...


# =============================================================================
# Exceptions
# =============================================================================

class ConfigurationError(Exception):
    """Deployment or setup defect, not a per-request condition."""
    pass


class NoSuchSerialiserError(ConfigurationError):
    """No serialiser registered for a data flavour."""

    def __init__(self, flavour: DataFlavour):
        self.flavour = flavour
        super().__init__(f"No serialiser registered for data flavour {flavour}")
