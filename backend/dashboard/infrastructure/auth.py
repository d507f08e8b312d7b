"""Credentials Auth — bcrypt password hashing, credential provider, and session sign-in.

Invariants:
    - Passwords are only ever stored as bcrypt digests
    - bcrypt runs in a worker thread (asyncio.to_thread), never on the event loop
    - sign_in() raises AuthenticationError with a typed `type`, never returns a falsy user
    - A signed-in session holds exactly one key: user_id (str UUID)

Design Decisions:
    - Provider registry keyed by name: sign_in("credentials", ...) mirrors how the login
      form names its method; unknown names fail with InvalidProvider
    - Database errors inside a provider become CallbackRouteError so the action layer
      maps them to the generic message instead of leaking driver details
    - Passwords are truncated to bcrypt's 72-byte limit before hashing and checking
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping, MutableMapping, Protocol

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.domain_types import UserId, parse_user_id
from dashboard.core.errors import (
    AuthenticationError, AuthErrorType, ErrorContext, FormValidationError,
)
from dashboard.models.user import User
from dashboard.schemas.forms import LoginForm, parse_form

logger = logging.getLogger(__name__)

CREDENTIALS_PROVIDER = "credentials"
SESSION_USER_KEY = "user_id"
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


async def hash_password(password: str, rounds: int = 10) -> str:
    """Salted bcrypt digest of password at the given cost factor."""
    salt = bcrypt.gensalt(rounds=rounds)
    digest = await asyncio.to_thread(bcrypt.hashpw, _encode(password), salt)
    return digest.decode("utf-8")


async def verify_password(password: str, digest: str) -> bool:
    try:
        return await asyncio.to_thread(
            bcrypt.checkpw, _encode(password), digest.encode("utf-8"),
        )
    except ValueError:
        # stored value is not a bcrypt digest
        return False


class Provider(Protocol):
    name: str

    async def authorize(self, credentials: Mapping[str, Any]) -> User | None: ...


class CredentialsProvider:
    """Email + password against the users table."""

    name = CREDENTIALS_PROVIDER

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authorize(self, credentials: Mapping[str, Any]) -> User | None:
        try:
            form = parse_form(LoginForm, credentials, "Invalid credentials")
        except FormValidationError:
            return None

        result = await self.db.execute(
            select(User).where(User.email == form.email),
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        if not await verify_password(form.password, user.password):
            return None
        return user


class Authenticator:
    """Dispatches sign-in to a named provider and records the user in the session."""

    def __init__(
        self,
        providers: Iterable[Provider],
        session: MutableMapping[str, Any],
    ):
        self._providers = {p.name: p for p in providers}
        self._session = session

    async def sign_in(
        self, provider_name: str, credentials: Mapping[str, Any],
    ) -> User:
        provider = self._providers.get(provider_name)
        if provider is None:
            raise AuthenticationError(AuthErrorType.INVALID_PROVIDER)

        try:
            user = await provider.authorize(credentials)
        except SQLAlchemyError as e:
            logger.error(
                f"Sign-in provider failed: {e}", extra={"provider": provider_name},
            )
            raise AuthenticationError(
                AuthErrorType.CALLBACK_ROUTE_ERROR,
                context=ErrorContext(operation="authorize"),
            ) from e

        if user is None:
            raise AuthenticationError(AuthErrorType.CREDENTIALS_SIGNIN)

        self._session[SESSION_USER_KEY] = str(user.id)
        logger.info("User signed in", extra={"provider": provider_name})
        return user

    def sign_out(self) -> None:
        self._session.pop(SESSION_USER_KEY, None)


def current_user_id(session: Mapping[str, Any]) -> UserId | None:
    """User id recorded by sign_in(), or None for anonymous sessions."""
    raw = session.get(SESSION_USER_KEY)
    return parse_user_id(raw) if raw else None
