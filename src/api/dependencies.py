from fastapi import Depends, HTTPException, Request

from api.context import AppContext
from port.user_repository import UserRepository
from utils.settings import Settings


def get_context(request: Request) -> AppContext:
    """Get the AppContext built at startup, raising 503 if it is missing."""
    context = getattr(request.app.state, 'context', None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return context


def get_user_repo(context: AppContext = Depends(get_context)) -> UserRepository:
    return context.user_repository


def get_app_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings
