from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import UUID4, ValidationError

from .config import settings
from .exceptions import InsufficientPermissionsHTTPException, InvalidTokenHTTPException
from .schemas.oauth2 import Identity, TokenPayloadBase, TokenType
from .schemas.user import Role

bearer_scheme = HTTPBearer(auto_error=False)


def create_jwt(token_data: TokenPayloadBase) -> str:
    now = datetime.now(timezone.utc)

    encode_data = {
        "sub": str(token_data.user_id),
        "role": token_data.role,
        "type": token_data.token_type.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }

    return jwt.encode(encode_data, settings.API_SECRET, algorithm=settings.ALGORITHM)


def create_access_token(user_id: UUID4, role: str) -> str:
    return create_jwt(TokenPayloadBase(user_id=user_id, role=role))


def decode_jwt(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.API_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidTokenHTTPException()

    if payload.get("type") != TokenType.access_token.value:
        raise InvalidTokenHTTPException(detail="Token types mismatch")

    try:
        return Identity(id=payload.get("sub"), role=payload.get("role"))
    except ValidationError:
        raise InvalidTokenHTTPException(detail="Malformed access token")


def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    if not credentials:
        raise InvalidTokenHTTPException(detail="Not authenticated")

    return decode_jwt(credentials.credentials)


def get_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role != Role.admin:
        raise InsufficientPermissionsHTTPException()

    return identity


def get_staff(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role not in (Role.admin, Role.doctor):
        raise InsufficientPermissionsHTTPException()

    return identity
