"""User service: create, get, update, delete and list use cases.

Pure business logic with no HTTP dependencies. Each public function
returns a UseCaseResult; route handlers map its error code to a status.
"""

import logging
import re
from dataclasses import dataclass, field, replace

import bcrypt

from domain.model.errors import ConflictError, NotFoundError, ValidationError
from domain.model.pagination import (
    MAX_LIMIT,
    MIN_LIMIT,
    PaginatedResult,
    PaginationMeta,
    PaginationOptions,
)
from domain.model.result import UseCaseResult
from domain.model.user import CreateUserParams, UpdateUserParams, User, UserFilters
from port.user_repository import UserRepository
from services.use_case import execute

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
# bcrypt only reads the first 72 bytes and newer releases reject longer input
PASSWORD_MAX_BYTES = 72


@dataclass(frozen=True)
class ListUsersRequest:
    page: int = 1
    limit: int = 10
    sort_by: str = 'created_at'
    sort_order: str = 'desc'
    filters: UserFilters = field(default_factory=UserFilters)

    def options(self) -> PaginationOptions:
        return PaginationOptions(
            page=self.page, limit=self.limit,
            sort_by=self.sort_by, sort_order=self.sort_order,
        )


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _validate_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")


def _validate_name(name: str) -> None:
    if not (NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH):
        raise ValidationError(
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        )


def _require_user(repo: UserRepository, user_id: str) -> User:
    user = repo.find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


# ── create ───────────────────────────────────────────────


def _validate_create(params: CreateUserParams) -> CreateUserParams:
    _validate_email(params.email)
    _validate_name(params.name)
    if params.password is None:
        return params
    if len(params.password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(params.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    # Plain text never travels past this point
    return replace(params, password=None, password_hash=_hash_password(params.password))


def create_user(repo: UserRepository, params: CreateUserParams) -> UseCaseResult[User]:
    """Create a user.

    Fails with EMAIL_CONFLICT if the email is taken and VALIDATION_ERROR
    for a malformed email, a name outside 2–100 characters or a password
    outside 8 characters to 72 bytes. The uniqueness check and the insert
    are separate statements, so two concurrent creates with the same email
    can both pass the check.
    """
    def perform(validated: CreateUserParams) -> User:
        if repo.find_by_email(validated.email):
            raise ConflictError("Email already registered")
        user = repo.create(validated)
        logger.info("User created successfully", extra={"userId": user.id})
        return user

    logger.info("Creating user", extra={"email": params.email})
    return execute("create user", params, _validate_create, perform)


# ── get ──────────────────────────────────────────────────


def get_user(repo: UserRepository, user_id: str) -> UseCaseResult[User]:
    return execute("get user", user_id, lambda uid: uid, lambda uid: _require_user(repo, uid))


# ── update ───────────────────────────────────────────────


def _validate_update(request: tuple[str, UpdateUserParams]) -> tuple[str, UpdateUserParams]:
    _, params = request
    if params.email is not None:
        _validate_email(params.email)
    if params.name is not None:
        _validate_name(params.name)
    return request


def update_user(repo: UserRepository, user_id: str, params: UpdateUserParams) -> UseCaseResult[User]:
    """Partially update a user.

    USER_NOT_FOUND for an unknown id, EMAIL_CONFLICT when the new email
    belongs to someone else.
    """
    def perform(validated: tuple[str, UpdateUserParams]) -> User:
        uid, changes = validated
        _require_user(repo, uid)

        if changes.email is not None:
            owner = repo.find_by_email(changes.email)
            if owner and owner.id != uid:
                raise ConflictError("Email already registered")

        updated = repo.update(uid, changes)
        if not updated:
            raise NotFoundError("User not found")
        logger.info("User updated successfully", extra={"userId": uid})
        return updated

    return execute("update user", (user_id, params), _validate_update, perform)


# ── delete ───────────────────────────────────────────────


def delete_user(repo: UserRepository, user_id: str) -> UseCaseResult[None]:
    def perform(uid: str) -> None:
        _require_user(repo, uid)
        # Lost a race with another delete
        if not repo.delete(uid):
            raise NotFoundError("User not found")
        logger.info("User deleted successfully", extra={"userId": uid})

    return execute("delete user", user_id, lambda uid: uid, perform)


# ── list ─────────────────────────────────────────────────


def _validate_list(request: ListUsersRequest) -> ListUsersRequest:
    if request.page < 1:
        raise ValidationError("Page must be at least 1")
    if not (MIN_LIMIT <= request.limit <= MAX_LIMIT):
        raise ValidationError(f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}")
    return request


def list_users(
    repo: UserRepository,
    request: ListUsersRequest,
    compose_filters: bool = False,
) -> UseCaseResult[PaginatedResult[User]]:
    """List users, either paginated or filtered.

    By default filtering and paging are exclusive: when any filter is set
    the result is every match, newest first, reported as a single page
    (``total_pages == 1``) and page/limit/sort are ignored. With
    ``compose_filters`` the filters narrow the set and the requested page
    is cut from it.
    """
    def perform(validated: ListUsersRequest) -> PaginatedResult[User]:
        filters = validated.filters
        if filters.is_empty():
            result = repo.find_with_pagination(validated.options())
        elif compose_filters:
            result = repo.find_with_pagination(validated.options(), filters)
        else:
            users = repo.find_by_filters(filters)
            result = PaginatedResult(
                data=users,
                meta=PaginationMeta(page=1, limit=len(users), total=len(users), total_pages=1),
            )

        logger.info("Users listed successfully", extra={
            "total": result.meta.total,
            "page": result.meta.page,
            "totalPages": result.meta.total_pages,
        })
        return result

    logger.info("Listing users", extra={
        "page": request.page,
        "limit": request.limit,
        "sortBy": request.sort_by,
        "sortOrder": request.sort_order,
        "hasFilters": not request.filters.is_empty(),
    })
    return execute("list users", request, _validate_list, perform)
