import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi_injector import Injected
from starlette_context import context
from audionotes.auth.utils import bearer_scheme
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.schemas.auth import AuthenticatedUser
from audionotes.services.auth import AuthService

logger = logging.getLogger(__name__)


async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        auth_service: AuthService = Injected(AuthService),
        ) -> Optional[AuthenticatedUser]:
    if credentials is None or not credentials.credentials:
        return None
    return await auth_service.decode_jwt(credentials.credentials)


async def auth(request: Request, user: Optional[AuthenticatedUser] = Depends(get_current_user)) -> AuthenticatedUser:
    """
    Requires a valid bearer token and records the caller in the request context.
    """
    if user is None:
        raise AppException(status_code=401, error_key=ErrorKey.NOT_AUTHENTICATED)

    request.state.user = user
    context["user_id"] = user.id
    return user
