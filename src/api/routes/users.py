"""User CRUD routes.

- GET    /users         list (paginated, or filtered)
- POST   /users         create
- GET    /users/{id}    read
- PUT    /users/{id}    partial update
- DELETE /users/{id}    delete

Handlers only translate HTTP to use case calls; every outcome comes back
as a UseCaseResult and is rendered as an envelope.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_app_settings, get_user_repo
from api.models import CreateUserRequest, UpdateUserRequest, UserListResponse, UserResponse
from api.responses import error_response, success_response
from domain.model.errors import ErrorCode
from domain.model.result import ErrorInfo
from domain.model.user import CreateUserParams, UpdateUserParams, UserFilters
from port.user_repository import UserRepository
from services import user_service
from utils.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    page: int = Query(1),
    limit: int = Query(10),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    email: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_app_settings),
):
    """List users.

    Without filters this returns the requested page. With any of
    ``isActive``/``email``/``name`` it returns every match as one page,
    unless USERS_COMPOSE_FILTERS is enabled.
    """
    request = user_service.ListUsersRequest(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=UserFilters(is_active=is_active, email=email, name=name),
    )
    result = user_service.list_users(repo, request, compose_filters=settings.compose_filters)
    if not result.success:
        return error_response(result.error)
    return success_response(UserListResponse.from_domain(result.data))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(request: CreateUserRequest, repo: UserRepository = Depends(get_user_repo)):
    # bcrypt hashing is CPU-bound; keep it off the event loop
    result = await asyncio.to_thread(
        user_service.create_user,
        repo,
        CreateUserParams(email=request.email, name=request.name, password=request.password),
    )
    if not result.success:
        return error_response(result.error)
    return success_response(UserResponse.from_domain(result.data), status.HTTP_201_CREATED)


@router.get("/{user_id}")
async def get_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    result = user_service.get_user(repo, user_id)
    if not result.success:
        return error_response(result.error)
    return success_response(UserResponse.from_domain(result.data))


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    repo: UserRepository = Depends(get_user_repo),
):
    params = UpdateUserParams(email=request.email, name=request.name, is_active=request.is_active)
    if not params.changes():
        return error_response(ErrorInfo("Update data is required", ErrorCode.VALIDATION_ERROR))

    result = user_service.update_user(repo, user_id, params)
    if not result.success:
        return error_response(result.error)
    return success_response(UserResponse.from_domain(result.data))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    result = user_service.delete_user(repo, user_id)
    if not result.success:
        return error_response(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
