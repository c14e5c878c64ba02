"""SQLAlchemy table definitions for the relational backend."""

from datetime import datetime
from logging import getLogger

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from utils.clock import utcnow

logger = getLogger(__name__)

USERS_TABLE_NAME = 'users'


class Base(DeclarativeBase):
    """Declarative base for all mapped tables."""
    pass


class UserRecord(Base):
    __tablename__ = USERS_TABLE_NAME

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False,
    )
    # onupdate stands in for a store-side "set updated_at" trigger
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False,
    )


def ensure_schema(engine: Engine) -> bool:
    """Create missing tables and indexes. Called at app startup."""
    try:
        Base.metadata.create_all(engine)
        return True
    except SQLAlchemyError as e:
        logger.error("Failed to create database schema", extra={"error": str(e)})
        return False
