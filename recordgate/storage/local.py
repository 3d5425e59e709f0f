"""
Local Filesystem Storage Backend

Opens resources from the local filesystem.

Accepted forms:
- Scheme-less URIs ("/data/employees.jsonl", "data/employees.jsonl")
- file URIs ("file:///data/employees.jsonl", "file://localhost/data/...")
- Plain paths that are not valid URIs ("/data/staff list.jsonl")

Relative locations resolve against the configured root directory.
Any other URI scheme (hdfs, s3, ...) is refused with UnsupportedSchemeError.
"""

import logging
from pathlib import Path
from typing import BinaryIO
from urllib.parse import SplitResult, unquote

from recordgate.storage.ports import StorageBackend, StorageError, UnsupportedSchemeError

logger = logging.getLogger(__name__)

LOCAL_SCHEMES = {"", "file"}
LOCAL_HOSTS = {"", "localhost"}


class LocalFileBackend(StorageBackend):
    """
    Filesystem-backed resource storage.

    Streams are opened in binary mode and are read lazily by the caller.
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else None

    def open_uri(self, uri: SplitResult) -> BinaryIO:
        if uri.scheme.lower() not in LOCAL_SCHEMES:
            raise UnsupportedSchemeError(uri.scheme)
        if uri.netloc.lower() not in LOCAL_HOSTS:
            raise UnsupportedSchemeError(f"{uri.scheme}://{uri.netloc}")
        return self._open(unquote(uri.path))

    def open_path(self, path: str) -> BinaryIO:
        return self._open(path)

    def _resolve(self, location: str) -> Path:
        path = Path(location)
        if self.root is not None and not path.is_absolute():
            path = self.root / path
        return path

    def _open(self, location: str) -> BinaryIO:
        path = self._resolve(location)
        logger.debug(f"Opening local file {path}")
        try:
            return open(path, "rb")
        except ValueError as e:
            # e.g. embedded NUL bytes
            raise StorageError(f"Invalid local path {location!r}: {e}") from e
