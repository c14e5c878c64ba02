from typing import Protocol

from domain.model.pagination import PaginatedResult, PaginationOptions
from domain.model.user import CreateUserParams, UpdateUserParams, User, UserFilters


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implemented by InMemoryUserRepository and SqlUserRepository. Both return
    detached copies; callers never hold references into the backing store.
    """
    def find_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def find_by_email(self, email: str) -> User | None:
        """Find a user by exact email. Return User or None if not found."""
        ...

    def find_all(self) -> list[User]:
        """Return every user, newest first."""
        ...

    def create(self, params: CreateUserParams) -> User:
        """Create a user. Email uniqueness is the caller's responsibility."""
        ...

    def update(self, user_id: str, params: UpdateUserParams) -> User | None:
        """Merge the supplied fields and refresh updated_at. None if unknown."""
        ...

    def delete(self, user_id: str) -> bool:
        """Permanently remove a user. Return True if a record was removed."""
        ...

    def find_with_pagination(
        self,
        options: PaginationOptions,
        filters: UserFilters | None = None,
    ) -> PaginatedResult[User]:
        """Sort and slice users; filters, if given, narrow the set first."""
        ...

    def find_by_filters(self, filters: UserFilters) -> list[User]:
        """Return all users matching every present filter, newest first."""
        ...
