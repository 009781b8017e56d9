"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes (the authorization guard)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.exceptions import Forbidden, InvalidToken, TokenExpired, Unauthenticated
from app.models.domain import Actor, User, UserRole

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; missing headers are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    def to_actor(self) -> Actor:
        return Actor(user_id=self.user_id, username=self.username, role=self.role)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash (constant-time compare inside passlib)."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unknown or corrupt hash format
        return False


@lru_cache()
def dummy_password_hash() -> str:
    """Hash checked when a login names an unknown user, so both failures cost the same."""
    return pwd_context.hash("not-a-real-password")


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token for a user."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=settings.jwt_expire_minutes))
    to_encode = {
        "sub": str(user.id),
        "user_id": user.id,
        "username": user.username,
        "role": user.role.value,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry of a JWT.

    Raises:
        TokenExpired: signature is fine but the token is past its exp
        InvalidToken: malformed, wrongly signed or missing claims
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidToken()

    try:
        return TokenClaims(
            user_id=int(payload["user_id"]),
            username=str(payload["username"]),
            role=UserRole(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    """
    FastAPI dependency - resolve the acting identity from the bearer token.

    Usage:
        @router.get("/protected")
        def route(actor: Actor = Depends(get_current_user)):
            return actor
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated()

    try:
        claims = decode_token(credentials.credentials)
    except (InvalidToken, TokenExpired) as exc:
        raise Unauthenticated("Invalid or expired token", details=exc.code)

    return claims.to_actor()


async def require_admin(actor: Actor = Depends(get_current_user)) -> Actor:
    """Dependency - Require admin role."""
    if not actor.is_admin:
        raise Forbidden("Access denied. Admins only")
    return actor
