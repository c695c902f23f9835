"""
Shared route dependencies: settings, cache, authentication and pagination
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.exceptions import AuthenticationError, ForbiddenError
from app.services.auth_service import AuthService, RequestContext
from app.utils.cache import CacheService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_request_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> RequestContext:
    """
    Resolve the bearer token into the caller's identity

    Raises:
        AuthenticationError: missing, invalid or expired token, or inactive user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided, authorization denied")

    context = AuthService(db, settings).resolve_context(credentials.credentials)
    request.state.user_id = context.user_id
    return context


def require_role(*roles: str) -> Callable[..., RequestContext]:
    """Dependency factory admitting only callers holding one of the given roles"""

    def checker(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not context.has_role(*roles):
            logger.info(f"Access denied for user {context.user_id} (role={context.role})")
            raise ForbiddenError("Access denied. Insufficient permissions.")
        return context

    return checker


current_user = require_role("admin", "user")
admin_only = require_role("admin")


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    request: Request,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1)
) -> PageParams:
    """Page number and size, with the size clamped to MAX_PAGE_SIZE"""
    settings = get_settings(request)
    size = limit or settings.DEFAULT_PAGE_SIZE
    return PageParams(page=page, limit=min(size, settings.MAX_PAGE_SIZE))
