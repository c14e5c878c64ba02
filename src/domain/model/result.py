"""Uniform result envelope returned by every use case."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from domain.model.errors import ErrorCode

T = TypeVar('T')


@dataclass(frozen=True)
class ErrorInfo:
    message: str
    code: ErrorCode


@dataclass(frozen=True)
class UseCaseResult(Generic[T]):
    """``{success, data, error}``. Exactly one of data/error is meaningful."""
    success: bool
    data: T | None = None
    error: ErrorInfo | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> UseCaseResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, code: ErrorCode) -> UseCaseResult[T]:
        return cls(success=False, error=ErrorInfo(message=message, code=code))
