"""
Data Reader

Binds the resource reader, the serialiser registry and the response writer
into a single read operation.

Read Flow:
1. Take a read slot, or refuse with NoCapacityError before any I/O
2. Resolve the serialiser for the resource's data flavour
3. Open the raw resource stream
4. Return a response wrapping a single-use writer over that stream

The slot is held until the response has been written, until opening fails,
or until an unwritten response is garbage collected, so max_concurrent_reads
bounds the streams open at any one time.
"""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO

from recordgate.reader.counters import AuditCounter
from recordgate.reader.errors import NoCapacityError
from recordgate.reader.models import DataReaderRequest
from recordgate.reader.resource import ResourceReader
from recordgate.reader.writer import SerialisingResponseWriter
from recordgate.serialisation import DataFlavour, Serialiser, SerialiserRegistry

logger = logging.getLogger(__name__)


class ReadSlots:
    """
    Non-blocking limit on concurrent reads.

    max_in_flight=None means unlimited.
    """

    def __init__(self, max_in_flight: int | None = None):
        if max_in_flight is not None and max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.max_in_flight = max_in_flight
        self._semaphore = threading.BoundedSemaphore(max_in_flight) if max_in_flight else None
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def try_acquire(self) -> bool:
        if self._semaphore is not None and not self._semaphore.acquire(blocking=False):
            return False
        with self._lock:
            self._in_flight += 1
        return True

    def release(self) -> None:
        with self._lock:
            self._in_flight -= 1
        if self._semaphore is not None:
            self._semaphore.release()


class DataReaderResponse:
    """
    Result of a read: a one-shot write of the enforced resource.
    """

    def __init__(self, writer: SerialisingResponseWriter):
        self._writer = writer

    def write(self, output: BinaryIO) -> SerialisingResponseWriter:
        """Write the resource to output. May be called once."""
        return self._writer.write(output)


class DataReader:
    """
    Reads single resources with record-level rules enforced.

    Composes a ResourceReader (how bytes are opened) with a
    SerialiserRegistry (how records are decoded) instead of specialising
    by subclass.
    """

    def __init__(
        self,
        resource_reader: ResourceReader,
        serialisers: SerialiserRegistry | None = None,
        max_concurrent_reads: int | None = None,
        name: str = "data-reader",
    ):
        self.name = name
        self.resource_reader = resource_reader
        self.serialisers = serialisers if serialisers is not None else SerialiserRegistry()
        self._slots = ReadSlots(max_concurrent_reads)

    @property
    def in_flight(self) -> int:
        return self._slots.in_flight

    def add_serialiser(self, flavour: DataFlavour, serialiser: Serialiser) -> None:
        self.serialisers.register(flavour, serialiser)

    def read(
        self,
        request: DataReaderRequest,
        records_processed: AuditCounter,
        records_returned: AuditCounter,
    ) -> DataReaderResponse:
        """
        Prepare the read of one resource under the request's rules.

        Args:
            request: Resource, rules, user and context for the read
            records_processed: Audit counter for records examined
            records_returned: Audit counter for records released

        Returns:
            Response whose write() streams the enforced resource

        Raises:
            NoCapacityError: If this reader cannot take another read now
            NoSuchSerialiserError: If the resource's flavour is unregistered
            ResourceReadError: If the resource cannot be opened
        """
        if request is None:
            raise ValueError("request is required")

        if not self._slots.try_acquire():
            in_flight = self._slots.in_flight
            logger.warning(
                f"{self.name} refusing read of {request.resource_id}: "
                f"{in_flight}/{self._slots.max_in_flight} reads in flight"
            )
            raise NoCapacityError(in_flight, self._slots.max_in_flight or 0)

        try:
            serialiser = self.serialisers.resolve(request.resource.flavour)
            stream = self.resource_reader.open_raw(request.resource_id)
            writer = SerialisingResponseWriter(
                stream=stream,
                serialiser=serialiser,
                request=request,
                records_processed=records_processed,
                records_returned=records_returned,
                on_close=self._slots.release,
            )
        except Exception:
            self._slots.release()
            raise

        logger.debug(f"{self.name} prepared read of {request.resource_id} for user {request.user.user_id}")
        return DataReaderResponse(writer)
