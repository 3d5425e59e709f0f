"""
SQLAlchemy Models for recordgate Storage

SQLAlchemy 2.0 ORM model for resources held in a relational database.
Each row is one resource: its identifier and its raw encoded bytes.

Designed to work with:
- SQLite (stdlib driver)
- PostgreSQL (psycopg)
- MySQL (pymysql)
"""

from datetime import datetime

from sqlalchemy import String, LargeBinary, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# =============================================================================
# Base
# =============================================================================

class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# =============================================================================
# Resource Model
# =============================================================================

class ResourceModel(Base):
    """
    Stored resource content.

    The resource identifier is the lookup key for both URI and plain-path
    forms; content is the resource's bytes exactly as serialised.
    """
    __tablename__ = "recordgate_resources"

    resource_id: Mapped[str] = mapped_column(String(1024), primary_key=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )
