"""
SQLAlchemy Storage Backend

SQLAlchemy 2.0 implementation serving resources stored as BLOB rows.
The request path is synchronous, so a plain Engine and sessionmaker are used.

Compatible with:
- SQLite
- PostgreSQL
- MySQL

The whole row is fetched when a resource is opened; the caller still
receives a stream and reads it at its own pace.
"""

import io
import logging
from typing import BinaryIO
from urllib.parse import SplitResult

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from recordgate.storage.ports import StorageBackend, StorageError, ResourceNotFoundError
from recordgate.storage.models import Base, ResourceModel

logger = logging.getLogger(__name__)


class SqlAlchemyBackend(StorageBackend):
    """
    SQLAlchemy implementation of resource storage.
    """

    def __init__(self, engine: Engine, create_tables: bool = True):
        self._engine = engine
        self._session_factory = sessionmaker(engine, class_=Session, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(engine)

    def put(self, resource_id: str, content: bytes) -> None:
        """Insert or replace a stored resource."""
        try:
            with self._session_factory() as session:
                session.merge(ResourceModel(resource_id=resource_id, content=bytes(content)))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to store resource {resource_id}: {e}") from e

    def open_uri(self, uri: SplitResult) -> BinaryIO:
        return self._open(uri.geturl())

    def open_path(self, path: str) -> BinaryIO:
        return self._open(path)

    def _open(self, resource_id: str) -> BinaryIO:
        try:
            with self._session_factory() as session:
                content = session.execute(
                    select(ResourceModel.content).where(ResourceModel.resource_id == resource_id)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load resource {resource_id}: {e}") from e

        if content is None:
            raise ResourceNotFoundError(resource_id)
        return io.BytesIO(content)

    def close(self) -> None:
        self._engine.dispose()
