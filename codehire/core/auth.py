# codehire/core/auth.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, Request, Response
from jose import jwt, JWTError
from sqlmodel import Session

from codehire.core.config import Settings
from codehire.core.errors import UnauthorizedError
from codehire.database import get_session
from codehire.models.user import User
from codehire.repositories.user_repo import UserRepository

user_repo = UserRepository()


class SessionIssuer:
    """
    Mints and verifies signed session tokens (HS256 JWT).

    Tokens carry:
      - sub: user id (UUID string)
      - iat / exp: issue time and expiry (issue time + ttl)

    Nothing is stored server-side, so there is no revocation: a token
    stays valid until it expires even after logout.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionIssuer":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALG,
            ttl=timedelta(days=settings.SESSION_TTL_DAYS),
        )

    def issue(self, user_id: uuid.UUID) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": str(user_id), "iat": now, "exp": now + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and verify a session token.

        Verification:
          - signature
          - expiration time (exp)

        Raises:
            UnauthorizedError: if token is invalid/expired.
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            raise UnauthorizedError("Invalid or expired session")

    def verify(self, token: str) -> uuid.UUID:
        """Return the user id the token was issued for."""
        sub = self.decode(token).get("sub")
        if not sub:
            raise UnauthorizedError("Invalid or expired session")
        try:
            return uuid.UUID(sub)
        except (TypeError, ValueError):
            raise UnauthorizedError("Invalid or expired session")


# ---------------------------------------------------------------------------
# Cookie transport
# ---------------------------------------------------------------------------


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_app_settings(request).SESSION_COOKIE_NAME)


def get_current_user(
    token: str | None = Depends(get_session_token),
    issuer: SessionIssuer = Depends(get_session_issuer),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from the session cookie.

    Flow:
      1. No cookie => anonymous => None.
      2. Verify signature/expiry => extract user id.
      3. Load the user (password hash deferred).

    Any failure along the way is treated as anonymous.
    """
    if not token:
        return None
    try:
        user_id = issuer.verify(token)
    except UnauthorizedError:
        return None
    return user_repo.get_by_id(session, user_id)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Raises:
        UnauthorizedError(401): if there is no valid session.
    """
    if user is None:
        raise UnauthorizedError()
    return user
