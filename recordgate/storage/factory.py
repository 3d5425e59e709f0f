"""
Storage Factory

Configuration and factory for storage backends.
Builds a StorageBackend from a flat string-to-string configuration mapping,
the form resource readers are configured with before the backend exists.

Supported backends:
- local: Local filesystem (plain paths and file:// URIs)
- memory: In-memory storage (development/testing)
- sqlite / postgresql / mysql: Resources stored as rows via SQLAlchemy
- redis: Resources stored as Redis values

Usage:
    # From a flat configuration mapping
    settings = settings_from_conf({"storage.backend": "local", "storage.root": "/data"})
    backend = create_backend(settings)

    # From environment (and .env)
    backend = create_backend_from_env()
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum

from dotenv import load_dotenv
from sqlalchemy import create_engine

from .ports import StorageBackend
from .local import LocalFileBackend
from .memory import InMemoryBackend
from .sqlalchemy import SqlAlchemyBackend

logger = logging.getLogger(__name__)


class BackendType(str, Enum):
    """Supported storage backends."""
    LOCAL = "local"
    MEMORY = "memory"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    REDIS = "redis"


SQL_BACKENDS = {BackendType.SQLITE, BackendType.POSTGRESQL, BackendType.MYSQL}

# Flat configuration keys -> StorageSettings attributes
CONF_KEYS = {
    "storage.backend": "backend",
    "storage.root": "root",
    "storage.database.url": "database_url",
    "storage.database.create-tables": "create_tables",
    "storage.redis.url": "redis_url",
    "storage.redis.key-prefix": "key_prefix",
}


@dataclass
class StorageSettings:
    """
    Configuration for the storage layer.

    Attributes:
        backend: Storage backend type
        root: Base directory for relative paths (local backend)
        database_url: SQLAlchemy connection URL (SQL backends)
        create_tables: Whether to auto-create the resource table
        redis_url: Redis connection URL (redis backend)
        key_prefix: Prefix for Redis keys (multi-tenant isolation)
        extra: Configuration entries with no dedicated attribute
    """
    backend: BackendType = BackendType.LOCAL
    root: str | None = None
    database_url: str | None = None
    create_tables: bool = True
    redis_url: str | None = None
    key_prefix: str = "recordgate"
    extra: dict[str, str] = field(default_factory=dict)


def _parse_database_url(url: str) -> BackendType:
    """Determine backend from database URL."""
    if url.startswith("sqlite"):
        return BackendType.SQLITE
    elif url.startswith("postgresql") or url.startswith("postgres"):
        return BackendType.POSTGRESQL
    elif url.startswith("mysql"):
        return BackendType.MYSQL
    else:
        raise ValueError(f"Unsupported database URL scheme: {url}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("false", "0", "no", "off")


def settings_from_conf(conf: Mapping[str, str] | None = None) -> StorageSettings:
    """
    Create StorageSettings from a flat configuration mapping.

    Recognised keys:
        storage.backend: "local", "memory", "sqlite", "postgresql", "mysql", "redis"
        storage.root: Base directory for relative paths
        storage.database.url: SQLAlchemy connection URL
        storage.database.create-tables: "false" to disable table creation
        storage.redis.url: Redis connection URL
        storage.redis.key-prefix: Redis key prefix

    Other keys are kept in ``extra`` so they survive a round trip through
    ``conf_map``.
    """
    settings = StorageSettings()
    if not conf:
        return settings

    for key, value in conf.items():
        attr = CONF_KEYS.get(key)
        if attr is None:
            settings.extra[key] = value
        elif attr == "backend":
            settings.backend = BackendType(value.strip().lower())
        elif attr == "create_tables":
            settings.create_tables = _parse_bool(value)
        else:
            setattr(settings, attr, value)

    # Auto-detect backend from URL if only a database URL was given
    if settings.database_url and "storage.backend" not in conf:
        settings.backend = _parse_database_url(settings.database_url)

    return settings


def settings_from_env() -> StorageSettings:
    """
    Create StorageSettings from environment variables.

    Variables are loaded from a .env file in the working directory first.

    Environment variables:
        RECORDGATE_STORAGE_BACKEND: Backend type
        RECORDGATE_STORAGE_ROOT: Base directory for relative paths
        RECORDGATE_DATABASE_URL: SQLAlchemy connection URL
        RECORDGATE_CREATE_TABLES: "false" to disable table creation
        RECORDGATE_REDIS_URL: Redis connection URL
        RECORDGATE_KEY_PREFIX: Redis key prefix
    """
    load_dotenv()

    env = {
        "storage.backend": os.getenv("RECORDGATE_STORAGE_BACKEND"),
        "storage.root": os.getenv("RECORDGATE_STORAGE_ROOT"),
        "storage.database.url": os.getenv("RECORDGATE_DATABASE_URL"),
        "storage.database.create-tables": os.getenv("RECORDGATE_CREATE_TABLES"),
        "storage.redis.url": os.getenv("RECORDGATE_REDIS_URL"),
        "storage.redis.key-prefix": os.getenv("RECORDGATE_KEY_PREFIX"),
    }
    return settings_from_conf({k: v for k, v in env.items() if v is not None})


def conf_map(settings: StorageSettings) -> dict[str, str]:
    """
    Flatten settings back into configuration entries.

    Only entries that differ from the defaults are returned, so the result
    describes exactly what was configured.
    """
    defaults = StorageSettings()
    result: dict[str, str] = {}
    attr_to_key = {attr: key for key, attr in CONF_KEYS.items()}

    for f in fields(StorageSettings):
        if f.name == "extra":
            continue
        value = getattr(settings, f.name)
        if value == getattr(defaults, f.name) or value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, bool):
            value = str(value).lower()
        result[attr_to_key[f.name]] = str(value)

    result.update(settings.extra)
    return result


def create_backend(settings: StorageSettings) -> StorageBackend:
    """
    Create a storage backend from settings.

    Args:
        settings: Storage configuration

    Returns:
        Configured StorageBackend

    Raises:
        ValueError: If settings are invalid
    """
    if settings.backend == BackendType.LOCAL:
        logger.info(f"Creating local file storage (root={settings.root})")
        return LocalFileBackend(root=settings.root)

    if settings.backend == BackendType.MEMORY:
        logger.info("Creating in-memory storage")
        return InMemoryBackend()

    if settings.backend in SQL_BACKENDS:
        if not settings.database_url:
            raise ValueError(
                f"database_url required for backend {settings.backend.value}"
            )
        logger.info(f"Creating SQL storage (backend={settings.backend.value})")
        engine = create_engine(settings.database_url)
        return SqlAlchemyBackend(engine, create_tables=settings.create_tables)

    if settings.backend == BackendType.REDIS:
        if not settings.redis_url:
            raise ValueError("redis_url required for backend redis")
        from .redis import RedisBackend
        from redis import Redis

        logger.info(f"Creating Redis storage (prefix={settings.key_prefix})")
        client = Redis.from_url(settings.redis_url, decode_responses=False)
        return RedisBackend(redis=client, key_prefix=settings.key_prefix)

    # Should never reach here, BackendType validates values
    raise ValueError(f"Unknown backend: {settings.backend}")


def create_backend_from_env() -> StorageBackend:
    """
    Create a storage backend from environment variables.

    Convenience function that combines settings_from_env() and create_backend().
    """
    return create_backend(settings_from_env())


# Convenience for quick setup
def create_memory_backend(resources: dict[str, bytes] | None = None) -> InMemoryBackend:
    """Create in-memory backend (for testing)."""
    return InMemoryBackend(resources)


def create_sqlite_backend(path: str = ":memory:", create_tables: bool = True) -> SqlAlchemyBackend:
    """Create SQLite-backed storage."""
    return SqlAlchemyBackend(create_engine(f"sqlite:///{path}"), create_tables=create_tables)
