"""SQLAlchemy implementation of UserRepository.

Sorting, filtering and paging are pushed into the query. Store failures
are logged with context and re-raised; the use case layer decides what
the caller sees.
"""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from typing import Callable

from sqlalchemy import String, and_, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from adapter.sql.tables import UserRecord
from domain.model.pagination import (
    PaginatedResult,
    PaginationMeta,
    PaginationOptions,
    SortOrder,
    resolve_sort_field,
    resolve_sort_order,
    total_pages,
)
from domain.model.user import CreateUserParams, UpdateUserParams, User, UserFilters
from utils.clock import MonotonicClock, utcnow

logger = getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class SqlUserRepository:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utcnow):
        self.engine = engine
        self._session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._now = MonotonicClock(clock)

    def _to_domain(self, record: UserRecord) -> User:
        """Convert a mapped row to a detached User domain model."""
        return User(
            id=record.id,
            email=record.email,
            name=record.name,
            is_active=record.is_active,
            created_at=_as_utc(record.created_at),
            updated_at=_as_utc(record.updated_at),
            password_hash=record.password_hash,
        )

    def _conditions(self, filters: UserFilters | None) -> list:
        """One WHERE clause per present filter."""
        if filters is None:
            return []
        conditions = []
        if filters.is_active is not None:
            conditions.append(UserRecord.is_active == filters.is_active)
        if filters.email:
            conditions.append(UserRecord.email.icontains(filters.email, autoescape=True))
        if filters.name:
            conditions.append(UserRecord.name.icontains(filters.name, autoescape=True))
        return conditions

    # ── write operations ─────────────────────────────────────

    def create(self, params: CreateUserParams) -> User:
        """Insert a new user row and return it."""
        now = self._now()
        try:
            with self._session.begin() as session:
                record = UserRecord(
                    id=uuid.uuid4().hex,
                    email=params.email,
                    name=params.name,
                    is_active=True,
                    password_hash=params.password_hash,
                    created_at=now,
                    updated_at=now,
                )
                session.add(record)
                session.flush()
                user = self._to_domain(record)
            logger.info("User created", extra={"userId": user.id, "email": user.email})
            return user
        except SQLAlchemyError as e:
            logger.error("Error creating user", extra={"email": params.email, "error": str(e)})
            raise

    def update(self, user_id: str, params: UpdateUserParams) -> User | None:
        """Apply only the supplied fields. Return None if the user does not exist."""
        changes = params.changes()
        try:
            with self._session.begin() as session:
                record = session.get(UserRecord, user_id)
                if record is None:
                    return None
                for key, value in changes.items():
                    setattr(record, key, value)
                record.updated_at = self._now()
                session.flush()
                user = self._to_domain(record)
            logger.info("User updated", extra={"userId": user_id, "fields": sorted(changes)})
            return user
        except SQLAlchemyError as e:
            logger.error("Error updating user", extra={"userId": user_id, "error": str(e)})
            raise

    def delete(self, user_id: str) -> bool:
        try:
            with self._session.begin() as session:
                result = session.execute(delete(UserRecord).where(UserRecord.id == user_id))
            deleted = result.rowcount > 0
            if deleted:
                logger.info("User deleted", extra={"userId": user_id})
            return deleted
        except SQLAlchemyError as e:
            logger.error("Error deleting user", extra={"userId": user_id, "error": str(e)})
            raise

    # ── read operations ──────────────────────────────────────

    def find_by_id(self, user_id: str) -> User | None:
        try:
            with self._session() as session:
                record = session.get(UserRecord, user_id)
                return self._to_domain(record) if record else None
        except SQLAlchemyError as e:
            logger.error("Error finding user by ID", extra={"userId": user_id, "error": str(e)})
            raise

    def find_by_email(self, email: str) -> User | None:
        try:
            with self._session() as session:
                record = session.scalars(
                    select(UserRecord).where(UserRecord.email == email)
                ).first()
                return self._to_domain(record) if record else None
        except SQLAlchemyError as e:
            logger.error("Error finding user by email", extra={"email": email, "error": str(e)})
            raise

    def find_all(self) -> list[User]:
        try:
            with self._session() as session:
                records = session.scalars(
                    select(UserRecord).order_by(UserRecord.created_at.desc())
                ).all()
                return [self._to_domain(r) for r in records]
        except SQLAlchemyError as e:
            logger.error("Error finding all users", extra={"error": str(e)})
            raise

    def find_with_pagination(
        self,
        options: PaginationOptions,
        filters: UserFilters | None = None,
    ) -> PaginatedResult[User]:
        """ORDER BY the allow-listed column, LIMIT/OFFSET, separate COUNT(*).

        Text columns are ordered by ``lower()`` so the result does not
        depend on the database collation.
        """
        column = getattr(UserRecord, resolve_sort_field(options.sort_by))
        if isinstance(column.type, String):
            column = func.lower(column)
        if resolve_sort_order(options.sort_order) is SortOrder.ASC:
            primary = column.asc().nulls_last()
        else:
            primary = column.desc().nulls_last()

        conditions = self._conditions(filters)
        count_stmt = select(func.count()).select_from(UserRecord)
        page_stmt = select(UserRecord)
        if conditions:
            count_stmt = count_stmt.where(and_(*conditions))
            page_stmt = page_stmt.where(and_(*conditions))
        # Ties fall back to insertion order, same as the in-memory stable sort
        page_stmt = (
            page_stmt
            .order_by(primary, UserRecord.created_at.asc(), UserRecord.id.asc())
            .limit(options.limit)
            .offset(options.offset)
        )

        try:
            with self._session() as session:
                total = session.scalar(count_stmt) or 0
                records = session.scalars(page_stmt).all()
                users = [self._to_domain(r) for r in records]
        except SQLAlchemyError as e:
            logger.error("Error finding users with pagination", extra={
                "page": options.page,
                "limit": options.limit,
                "error": str(e),
            })
            raise

        return PaginatedResult(
            data=users,
            meta=PaginationMeta(
                page=options.page,
                limit=options.limit,
                total=total,
                total_pages=total_pages(total, options.limit),
            ),
        )

    def find_by_filters(self, filters: UserFilters) -> list[User]:
        stmt = select(UserRecord)
        conditions = self._conditions(filters)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(UserRecord.created_at.desc())

        try:
            with self._session() as session:
                return [self._to_domain(r) for r in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            logger.error("Error finding users by filters", extra={"error": str(e)})
            raise
