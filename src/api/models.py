"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from domain.model.pagination import PaginatedResult
from domain.model.result import ErrorInfo
from domain.model.user import User


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (isActive, createdAt, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateUserRequest(CamelModel):
    """Request model for creating a user."""
    model_config = ConfigDict(extra='forbid')

    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: Optional[str] = Field(None, max_length=72, description="Optional; stored as a bcrypt hash")


class UpdateUserRequest(CamelModel):
    """Request model for a partial user update."""
    model_config = ConfigDict(extra='forbid')

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    """Response model for a user. Never includes the password hash."""
    id: str = Field(..., description="User ID")
    email: str
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class PaginationMetaResponse(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class UserListResponse(BaseModel):
    """Response model for a page of users."""
    data: list[UserResponse]
    meta: PaginationMetaResponse

    @classmethod
    def from_domain(cls, result: PaginatedResult[User]) -> 'UserListResponse':
        return cls(
            data=[UserResponse.from_domain(u) for u in result.data],
            meta=PaginationMetaResponse(
                page=result.meta.page,
                limit=result.meta.limit,
                total=result.meta.total,
                total_pages=result.meta.total_pages,
            ),
        )


class ErrorResponse(BaseModel):
    message: str
    code: str

    @classmethod
    def from_domain(cls, error: ErrorInfo) -> 'ErrorResponse':
        return cls(message=error.message, code=error.code.value)
