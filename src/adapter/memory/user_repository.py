"""In-memory implementation of UserRepository.

Used as the fallback backend when no database is configured or reachable,
and as the repository double in service and route tests.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable

from domain.model.pagination import PaginatedResult, PaginationOptions, paginate
from domain.model.user import CreateUserParams, UpdateUserParams, User, UserFilters
from utils.clock import MonotonicClock, utcnow

logger = logging.getLogger(__name__)


class InMemoryUserRepository:
    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.store: dict[str, User] = {}
        self._now = MonotonicClock(clock)

    def _newest_first(self, users) -> list[User]:
        return [replace(u) for u in sorted(users, key=lambda u: u.created_at, reverse=True)]

    # ── write operations ─────────────────────────────────────

    def create(self, params: CreateUserParams) -> User:
        now = self._now()
        user = User(
            id=uuid.uuid4().hex,
            email=params.email,
            name=params.name,
            is_active=True,
            created_at=now,
            updated_at=now,
            password_hash=params.password_hash,
        )
        self.store[user.id] = user
        logger.info("User created in memory", extra={"userId": user.id})
        return replace(user)

    def update(self, user_id: str, params: UpdateUserParams) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        updated = replace(user, **params.changes(), updated_at=self._now())
        self.store[user_id] = updated
        logger.info("User updated in memory", extra={"userId": user_id})
        return replace(updated)

    def delete(self, user_id: str) -> bool:
        if self.store.pop(user_id, None) is None:
            return False
        logger.info("User deleted from memory", extra={"userId": user_id})
        return True

    # ── read operations ──────────────────────────────────────

    def find_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def find_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def find_all(self) -> list[User]:
        return self._newest_first(self.store.values())

    def find_with_pagination(
        self,
        options: PaginationOptions,
        filters: UserFilters | None = None,
    ) -> PaginatedResult[User]:
        users = list(self.store.values())
        if filters is not None and not filters.is_empty():
            users = [u for u in users if filters.matches(u)]

        result = paginate(users, options)
        return PaginatedResult(data=[replace(u) for u in result.data], meta=result.meta)

    def find_by_filters(self, filters: UserFilters) -> list[User]:
        return self._newest_first(u for u in self.store.values() if filters.matches(u))
