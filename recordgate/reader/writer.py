"""
Serialising Response Writer

Writes one resource's records to an output sink with the request's rules
enforced. This is the record-level enforcement point: whatever leaves
write() is what the user is allowed to see.

Write Flow:
1. Claim the single write (atomic test-and-set); a second write fails
2. If no rule is applicable to (user, context), copy bytes verbatim and mark
   both audit counters NOT_COUNTED
3. Otherwise deserialise, apply the applicable rules record by record while
   counting processed/returned records, and serialise the survivors
4. Always close the input stream, exactly once, whatever happened above

A writer that is garbage collected without being written still closes its
stream and runs on_close, once.
"""

from __future__ import annotations

import io
import logging
import shutil
import threading
import weakref
from collections.abc import Iterable, Iterator
from typing import Any, BinaryIO, Callable

from recordgate.reader.counters import AuditCounter
from recordgate.reader.errors import ResourceReadError, ResponseAlreadyWrittenError
from recordgate.reader.models import DataReaderRequest
from recordgate.rules import Rule
from recordgate.serialisation import Serialiser

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 64 * 1024


def _close_stream(stream: BinaryIO, resource_id: str, on_close: Callable[[], None] | None) -> None:
    try:
        stream.close()
    except Exception as e:
        logger.debug(f"Error closing stream for {resource_id}: {e}", exc_info=True)
    if on_close is not None:
        on_close()


class _GuardedInput(io.RawIOBase):
    """
    Read-only view of the input stream that reports read failures as
    ResourceReadError for the resource.

    Closing the view does not close the underlying stream; the writer
    closes that itself.
    """

    def __init__(self, stream: BinaryIO, resource_id: str):
        self._stream = stream
        self._resource_id = resource_id

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        try:
            data = self._stream.read(len(buffer))
        except OSError as e:
            raise ResourceReadError(self._resource_id, e) from e
        if not data:
            return 0
        n = len(data)
        buffer[:n] = data
        return n


class SerialisingResponseWriter:
    """
    Single-use writer bound to one request's input stream.

    Owns the input stream from construction: it is closed when write()
    finishes, successfully or not.
    """

    def __init__(
        self,
        stream: BinaryIO,
        serialiser: Serialiser,
        request: DataReaderRequest,
        records_processed: AuditCounter,
        records_returned: AuditCounter,
        on_close: Callable[[], None] | None = None,
    ):
        """
        Args:
            stream: Raw input stream for the requested resource
            serialiser: Serialiser for the resource's data flavour
            request: The read request, carrying rules, user and context
            records_processed: Counter for records pulled from the resource
            records_returned: Counter for records released to the output
            on_close: Called once after the input stream has been closed
        """
        if stream is None:
            raise ValueError("stream is required")
        if serialiser is None:
            raise ValueError("serialiser is required")
        if request is None:
            raise ValueError("request is required")
        self._stream = stream
        self._serialiser = serialiser
        self._request = request
        self._records_processed = records_processed
        self._records_returned = records_returned
        self._written = False
        self._written_lock = threading.Lock()
        # Runs at most once: on write, or on collection if never written
        self._finalizer = weakref.finalize(self, _close_stream, stream, request.resource_id, on_close)

    @property
    def written(self) -> bool:
        return self._written

    def _claim_write(self) -> bool:
        """Atomically set the written flag, returning its previous value."""
        with self._written_lock:
            previous = self._written
            self._written = True
            return previous

    def write(self, output: BinaryIO) -> SerialisingResponseWriter:
        """
        Write the rule-enforced resource to the output sink.

        Returns:
            This writer

        Raises:
            ResponseAlreadyWrittenError: If write() was already called
            ResourceReadError: If the input stream fails mid-transfer
        """
        if output is None:
            raise ValueError("output is required")

        if self._claim_write():
            raise ResponseAlreadyWrittenError()

        request = self._request
        rules = request.rules
        source = io.BufferedReader(_GuardedInput(self._stream, request.resource_id))

        try:
            # If no rules apply, copy the bytes across untouched. NOT_COUNTED
            # marks that records were neither processed nor returned.
            if not rules.any_applicable(request.user, request.context):
                logger.debug("No rules to apply")
                shutil.copyfileobj(source, output, COPY_BUFFER_SIZE)
                self._records_processed.mark_not_counted()
                self._records_returned.mark_not_counted()
            else:
                applicable = rules.applicable(request.user, request.context)
                logger.debug(f"Applying rules: {rules}")
                logger.debug(f"Using serialiser {self._serialiser!r}")
                records = self._serialiser.deserialise(source)
                self._serialiser.serialise(self._apply_rules(records, applicable), output)
            return self
        finally:
            self._close()

    def _apply_rules(self, records: Iterable[Any], applicable: list[Rule]) -> Iterator[Any]:
        """
        Lazily enforce rules, counting in emission order.

        Each record passes through the applicable rules in order; a rule
        returning None drops the record and skips the remaining rules.
        """
        user = self._request.user
        context = self._request.context
        for record in records:
            self._records_processed.increment()
            for rule in applicable:
                record = rule.apply(record, user, context)
                if record is None:
                    break
            if record is None:
                continue
            self._records_returned.increment()
            yield record

    def _close(self) -> None:
        self._finalizer()

    def __repr__(self) -> str:
        return (
            f"SerialisingResponseWriter(resource={self._request.resource_id!r}, "
            f"written={self._written}, serialiser={self._serialiser!r})"
        )
