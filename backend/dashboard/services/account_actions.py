"""Account Actions — user registration and credential sign-in handlers.

Invariants:
    - register validates before any database access; failures return one aggregated message
    - register checks for an existing email, then inserts; a unique-constraint conflict on
      insert reports the same "already exists" message as the check
    - register redirects to the login path on success only
    - authenticate maps AuthenticationError by type; every other exception propagates

Design Decisions:
    - The existence check avoids hashing for known emails; the unique constraint on
      users.email is what actually guarantees uniqueness under concurrency
    - sign_in is injected (SignIn protocol): the handler never knows about sessions or bcrypt
"""

import logging
from typing import Any, Mapping

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.config import Settings, get_settings
from dashboard.core import messages
from dashboard.core.boundary_protocols import SignIn
from dashboard.core.domain_types import ActionKind
from dashboard.core.errors import (
    AuthenticationError, AuthErrorType, DuplicateRecordError, FormValidationError,
)
from dashboard.core.submission import ActionResult, Submission, SubmissionPhase
from dashboard.infrastructure.auth import CREDENTIALS_PROVIDER, hash_password
from dashboard.infrastructure.database import translate_db_error
from dashboard.models.user import User
from dashboard.schemas.forms import RegisterForm, parse_form

logger = logging.getLogger(__name__)


class AccountActions:
    """Form handlers for the register and login pages."""

    def __init__(
        self,
        db: AsyncSession | None,
        sign_in: SignIn | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.sign_in = sign_in
        self.settings = settings or get_settings()

    async def register(self, form: Mapping[str, Any]) -> ActionResult:
        submission = Submission(ActionKind.REGISTER.value)
        submission.advance(SubmissionPhase.VALIDATING)
        try:
            data = parse_form(RegisterForm, form, messages.REGISTER_INVALID)
        except FormValidationError as e:
            logger.info("Registration rejected", extra={"action": submission.action})
            return submission.reject(messages.REGISTER_INVALID, error=e)

        submission.advance(SubmissionPhase.PERSISTING)
        try:
            existing = await self.db.execute(
                select(User.id).where(User.email == data.email),
            )
            if existing.first() is not None:
                return submission.fail(
                    messages.REGISTER_DUPLICATE, DuplicateRecordError("select"),
                )

            digest = await hash_password(data.password, self.settings.bcrypt_rounds)
            await self.db.execute(
                insert(User).values(
                    name=data.name, email=data.email, password=digest,
                ),
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            error = translate_db_error(e, "insert")
            if isinstance(error, DuplicateRecordError):
                logger.info(
                    "Registration lost the race on a duplicate email",
                    extra={"error_code": error.code},
                )
                return submission.fail(messages.REGISTER_DUPLICATE, error)
            logger.error(
                f"Registration Error: {e}",
                extra={"error_code": error.code, "operation": error.operation},
            )
            return submission.fail(messages.REGISTER_DB_ERROR, error)

        return submission.commit(redirect_to=self.settings.login_path)

    async def authenticate(self, form: Mapping[str, Any]) -> ActionResult:
        """Sign in with the credentials provider; map auth failures to form messages."""
        if self.sign_in is None:
            raise RuntimeError("authenticate requires a sign_in callable")

        submission = Submission("authenticate")
        submission.advance(SubmissionPhase.VALIDATING)
        submission.advance(SubmissionPhase.PERSISTING)
        try:
            await self.sign_in(CREDENTIALS_PROVIDER, form)
        except AuthenticationError as e:
            logger.warning(
                f"Sign-in failed: {e.type.value}",
                extra={"error_code": e.code, "provider": CREDENTIALS_PROVIDER},
            )
            return submission.fail(auth_error_message(e), e)

        return submission.commit(redirect_to=self.settings.dashboard_path)


def auth_error_message(error: AuthenticationError) -> str:
    if error.type == AuthErrorType.CREDENTIALS_SIGNIN:
        return messages.INVALID_CREDENTIALS
    return messages.AUTH_GENERIC
