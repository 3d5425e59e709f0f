"""
Data Reader Factory

Builds a DataReader from configuration.

Environment Variables:
- RECORDGATE_READER_NAME: Name used in log lines (default: data-reader)
- RECORDGATE_MAX_CONCURRENT_READS: Reads allowed in flight, unset for unlimited
- RECORDGATE_STORAGE_*: Storage backend selection, see recordgate.storage.factory
"""

import logging
import os
from collections.abc import Mapping
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from recordgate.reader.reader import DataReader
from recordgate.reader.resource import BackendResourceReader
from recordgate.serialisation import DataFlavour, Serialiser, SerialiserRegistry
from recordgate.storage import (
    StorageBackend,
    StorageSettings,
    create_backend,
    settings_from_conf,
    settings_from_env,
)

logger = logging.getLogger(__name__)


class ReaderConfig(BaseModel):
    """Configuration for DataReader initialization."""

    name: str = Field(
        default="data-reader",
        min_length=1,
        description="Reader name used in log lines",
    )
    max_concurrent_reads: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum reads in flight before refusing with NoCapacityError (None = unlimited)",
    )


def create_data_reader(
    config: ReaderConfig | None = None,
    storage: StorageBackend | StorageSettings | Mapping[str, str] | None = None,
    serialisers: Mapping[DataFlavour, Serialiser] | None = None,
) -> DataReader:
    """
    Create a data reader.

    Args:
        config: Reader configuration (defaults apply if None)
        storage: A ready backend, storage settings, or a flat storage
                 configuration mapping (e.g. {"storage.backend": "local"})
        serialisers: Serialisers to register, keyed by data flavour

    Returns:
        Configured DataReader

    Example:
        >>> reader = create_data_reader(
        ...     ReaderConfig(max_concurrent_reads=8),
        ...     storage={"storage.backend": "local", "storage.root": "/data"},
        ...     serialisers={DataFlavour("employee", "jsonl"): JsonLinesSerialiser(Employee)},
        ... )
    """
    config = config or ReaderConfig()

    if isinstance(storage, StorageBackend):
        backend = storage
    elif isinstance(storage, StorageSettings):
        backend = create_backend(storage)
    else:
        backend = create_backend(settings_from_conf(storage))

    reader = DataReader(
        resource_reader=BackendResourceReader(backend),
        serialisers=SerialiserRegistry(serialisers),
        max_concurrent_reads=config.max_concurrent_reads,
        name=config.name,
    )
    logger.info(
        f"Created data reader {config.name} "
        f"(backend={type(backend).__name__}, max_concurrent_reads={config.max_concurrent_reads})"
    )
    return reader


def config_from_env() -> ReaderConfig:
    """Create ReaderConfig from environment variables (and .env)."""
    load_dotenv()
    max_reads = os.getenv("RECORDGATE_MAX_CONCURRENT_READS")
    return ReaderConfig(
        name=os.getenv("RECORDGATE_READER_NAME", "data-reader"),
        max_concurrent_reads=int(max_reads) if max_reads else None,
    )


def create_data_reader_from_env(
    serialisers: Mapping[DataFlavour, Serialiser] | None = None,
) -> DataReader:
    """
    Create a data reader from environment variables.

    Convenience function that combines config_from_env(), settings_from_env()
    and create_data_reader().
    """
    return create_data_reader(config_from_env(), settings_from_env(), serialisers)
