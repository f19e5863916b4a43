from datetime import datetime, timedelta
from typing import Iterable, Optional

import bcrypt
from jose import jwt
from jose.exceptions import JWTError
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.models.enums import Role, STAFF_ROLES

# Security scheme for Swagger UI; a missing header means "no session", not an error
security = HTTPBearer(auto_error=False)

class TokenPayload(BaseModel):
    """Model representing JWT token payload."""
    sub: Optional[str] = None
    exp: Optional[int] = None
    role: Optional[Role] = None
    isVerifiedByAdmin: bool = False

class SessionData(BaseModel):
    """The caller's identity as carried by a valid session token."""
    id: str
    role: Role
    isVerifiedByAdmin: bool = False


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: str,
    role: Role,
    is_verified: bool = False,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a session token for the given user."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": user_id,
        "role": Role(role).value,
        "isVerifiedByAdmin": bool(is_verified),
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session(token: str) -> Optional[SessionData]:
    """
    Verify and decode a session token.

    Returns None for expired, tampered or incomplete tokens.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        return None

    if token_data.sub is None or token_data.role is None:
        return None

    return SessionData(
        id=token_data.sub,
        role=token_data.role,
        isVerifiedByAdmin=token_data.isVerifiedByAdmin,
    )


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[SessionData]:
    """Dependency resolving the caller's session, or None."""
    if credentials is None:
        return None
    return decode_session(credentials.credentials)


def authorize(session: Optional[SessionData], required_roles: Iterable[Role]) -> bool:
    """The single access policy: a session must exist and hold one of the roles."""
    if session is None:
        return False
    return session.role in set(required_roles)


def require_roles(*roles: Role):
    """Dependency factory rejecting callers outside the given roles with 401."""
    def role_checker(session: Optional[SessionData] = Depends(get_current_session)) -> SessionData:
        if not authorize(session, roles):
            raise UnauthorizedError()
        return session
    return role_checker


def require_session(session: Optional[SessionData] = Depends(get_current_session)) -> SessionData:
    """Dependency requiring any valid session."""
    if session is None:
        raise UnauthorizedError()
    return session


# Users and vehicles are managed by administrators and owners alike
staff_required = require_roles(*STAFF_ROLES)
