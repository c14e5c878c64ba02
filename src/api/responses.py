"""Envelope responses: ``{success, data}`` or ``{success, error}``."""

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.models import ErrorResponse
from domain.model.errors import ErrorCode
from domain.model.result import ErrorInfo

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EMAIL_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def success_response(payload: BaseModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": payload.model_dump(mode="json", by_alias=True)},
    )


def error_response(error: ErrorInfo) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"success": False, "error": ErrorResponse.from_domain(error).model_dump()},
    )
