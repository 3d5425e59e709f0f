"""
Redis Storage Backend

Redis-based resource storage.
Ideal for:
- Small, hot resources shared between reader instances
- Ephemeral datasets that benefit from Redis speed and TTLs

Uses the synchronous redis client; the request path is blocking.

Key pattern:
- {prefix}:resource:{resource_id} -> raw resource bytes
"""

from __future__ import annotations

import io
from typing import BinaryIO
from urllib.parse import SplitResult

from redis import Redis, RedisError

from .ports import StorageBackend, StorageError, ResourceNotFoundError


class RedisBackend(StorageBackend):
    """
    Redis-based resource storage with optional TTL on writes.
    """

    def __init__(
        self,
        redis: Redis,
        key_prefix: str = "recordgate",
        default_ttl_seconds: int | None = None,
    ) -> None:
        """
        Initialize Redis backend.

        Args:
            redis: Redis client (must return bytes, i.e. decode_responses=False)
            key_prefix: Prefix for all keys (multi-tenant isolation)
            default_ttl_seconds: TTL applied by put(), None to keep forever
        """
        self._redis = redis
        self._prefix = key_prefix
        self._ttl = default_ttl_seconds

    def _resource_key(self, resource_id: str) -> str:
        """Key for resource content."""
        return f"{self._prefix}:resource:{resource_id}"

    def put(self, resource_id: str, content: bytes) -> None:
        try:
            self._redis.set(self._resource_key(resource_id), bytes(content), ex=self._ttl)
        except RedisError as e:
            raise StorageError(f"Failed to store resource {resource_id}: {e}") from e

    def open_uri(self, uri: SplitResult) -> BinaryIO:
        return self._open(uri.geturl())

    def open_path(self, path: str) -> BinaryIO:
        return self._open(path)

    def _open(self, resource_id: str) -> BinaryIO:
        try:
            data = self._redis.get(self._resource_key(resource_id))
        except RedisError as e:
            raise StorageError(f"Failed to load resource {resource_id}: {e}") from e

        if data is None:
            raise ResourceNotFoundError(resource_id)
        if isinstance(data, str):
            data = data.encode("utf-8")
        return io.BytesIO(data)

    def close(self) -> None:
        self._redis.close()
