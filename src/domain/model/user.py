from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
    password_hash: str | None = None


@dataclass(frozen=True)
class CreateUserParams:
    """Input for creating a user.

    ``password`` is plain text at the service boundary; repositories only
    ever see ``password_hash``.
    """
    email: str
    name: str
    password: str | None = None
    password_hash: str | None = None


@dataclass(frozen=True)
class UpdateUserParams:
    """Partial update. Fields left as None are not touched."""
    email: str | None = None
    name: str | None = None
    is_active: bool | None = None

    def changes(self) -> dict:
        return {k: v for k, v in (
            ('email', self.email),
            ('name', self.name),
            ('is_active', self.is_active),
        ) if v is not None}


@dataclass(frozen=True)
class UserFilters:
    """Filters for listing users. All present filters are ANDed."""
    is_active: bool | None = None
    email: str | None = None
    name: str | None = None

    def is_empty(self) -> bool:
        return self.is_active is None and not self.email and not self.name

    def matches(self, user: User) -> bool:
        if self.is_active is not None and user.is_active != self.is_active:
            return False
        if self.email and self.email.lower() not in user.email.lower():
            return False
        if self.name and self.name.lower() not in user.name.lower():
            return False
        return True
