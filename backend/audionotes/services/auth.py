import logging
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.schemas.auth import AuthenticatedUser


logger = logging.getLogger(__name__)


class AuthService:
    """Verifies access tokens issued by the identity provider."""

    def __init__(
        self,
        verification_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        self.verification_key = verification_key or settings.AUTH_JWT_PUBLIC_KEY
        self.algorithm = algorithm or settings.AUTH_JWT_ALGORITHM
        self.audience = audience or settings.AUTH_JWT_AUDIENCE
        self.issuer = issuer or settings.AUTH_JWT_ISSUER


    async def decode_jwt(self, token: str) -> AuthenticatedUser:
        try:
            payload = jwt.decode(
                token,
                self.verification_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError as error:
            raise AppException(status_code=401, error_key=ErrorKey.EXPIRED_TOKEN,
                               error_detail=f"Expired token: {error}")
        except JWTError as error:
            raise AppException(status_code=401, error_key=ErrorKey.COULD_NOT_VALIDATE_CREDENTIALS,
                               error_detail=f"JWT error: {error}", error_obj=error)

        subject = payload.get("sub")
        try:
            user_id = UUID(str(subject))
        except ValueError:
            raise AppException(status_code=401, error_key=ErrorKey.COULD_NOT_VALIDATE_CREDENTIALS,
                               error_detail=f"JWT error: subject is not a user id ({subject!r})")

        return AuthenticatedUser(id=user_id, email=payload.get("email"))
