# Storage Layer
# Pluggable raw-stream access for the recordgate data reader
#
# This module provides:
# - Port interface (ABC) defining the storage backend contract
# - Local filesystem and in-memory backends
# - SQLAlchemy and Redis backends for shared resource storage
# - Factory for configuration-based backend selection

from .ports import (
    StorageBackend,
    StorageError,
    ResourceNotFoundError,
    UnsupportedSchemeError,
)
from .local import LocalFileBackend
from .memory import InMemoryBackend
from .factory import (
    BackendType,
    StorageSettings,
    settings_from_conf,
    settings_from_env,
    conf_map,
    create_backend,
    create_backend_from_env,
    create_memory_backend,
    create_sqlite_backend,
)

__all__ = [
    # Ports
    "StorageBackend",
    "StorageError",
    "ResourceNotFoundError",
    "UnsupportedSchemeError",
    # Backends
    "LocalFileBackend",
    "InMemoryBackend",
    # Factory
    "BackendType",
    "StorageSettings",
    "settings_from_conf",
    "settings_from_env",
    "conf_map",
    "create_backend",
    "create_backend_from_env",
    "create_memory_backend",
    "create_sqlite_backend",
]
