"""Use case pipeline: validate → perform → result envelope.

Every user use case is a pair of plain functions composed by ``execute``.
This is the recovery boundary: nothing raised below it reaches the HTTP
layer.
"""

import logging
from typing import Callable, TypeVar

from domain.model.errors import DomainError, ErrorCode
from domain.model.result import UseCaseResult

logger = logging.getLogger(__name__)

Req = TypeVar('Req')
Validated = TypeVar('Validated')
T = TypeVar('T')


def execute(
    action: str,
    request: Req,
    validate: Callable[[Req], Validated],
    perform: Callable[[Validated], T],
) -> UseCaseResult[T]:
    """Run one use case and wrap the outcome.

    Args:
        action: Short verb phrase used in logs and the generic error
            message, e.g. ``"create user"``.
        request: Raw request passed to ``validate``.
        validate: Pure check/normalize step. Raises ValidationError.
        perform: Repository work on the validated request. May raise any
            DomainError; anything else is treated as an internal failure.

    Returns:
        ``UseCaseResult.ok(data)`` on success, otherwise a failed result
        carrying the domain error's message and code, or a generic
        ``INTERNAL_ERROR``.
    """
    try:
        validated = validate(request)
        data = perform(validated)
    except DomainError as e:
        logger.info(f"Could not {action}", extra={"code": e.code.value, "reason": e.message})
        return UseCaseResult.fail(e.message, e.code)
    except Exception:
        logger.exception(f"Failed to {action}")
        return UseCaseResult.fail(f"Failed to {action}", ErrorCode.INTERNAL_ERROR)

    return UseCaseResult.ok(data)
