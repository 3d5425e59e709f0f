"""
In-Memory Storage Backend

Thread-safe implementation for development and testing.
Uses a threading lock for concurrent request threads.

Resources are kept as bytes keyed by identifier and are lost on restart.
Use for:
- Local development
- Unit/integration testing
- Serving small, static reference datasets
"""

import io
import threading
from typing import BinaryIO
from urllib.parse import SplitResult

from recordgate.storage.ports import StorageBackend, ResourceNotFoundError


class InMemoryBackend(StorageBackend):
    """
    In-memory resource storage.

    URIs are looked up by their normalised text form, plain paths verbatim.
    """

    def __init__(self, resources: dict[str, bytes] | None = None):
        self._resources: dict[str, bytes] = dict(resources or {})
        self._lock = threading.Lock()

    def put(self, location: str, data: bytes) -> None:
        with self._lock:
            self._resources[location] = bytes(data)

    def remove(self, location: str) -> bool:
        with self._lock:
            return self._resources.pop(location, None) is not None

    def __contains__(self, location: object) -> bool:
        with self._lock:
            return location in self._resources

    def open_uri(self, uri: SplitResult) -> BinaryIO:
        return self._open(uri.geturl())

    def open_path(self, path: str) -> BinaryIO:
        return self._open(path)

    def _open(self, location: str) -> BinaryIO:
        with self._lock:
            data = self._resources.get(location)
        if data is None:
            raise ResourceNotFoundError(location)
        return io.BytesIO(data)
