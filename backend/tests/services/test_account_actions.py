"""Account Actions — registration and credential sign-in handlers.

Invariants:
    - Short passwords are rejected before any database access
    - An existing email reports "already exists" and inserts nothing
    - A unique-constraint conflict on insert reports the same message
    - authenticate maps CredentialsSignin → "Invalid credentials.", any other type →
      "Something went wrong.", and lets every other exception through untouched
"""

import logging
import sqlite3

import bcrypt
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from dashboard.config import Settings
from dashboard.core import messages
from dashboard.core.errors import AuthenticationError, AuthErrorType, DuplicateRecordError
from dashboard.core.submission import SubmissionPhase
from dashboard.models.user import User
from dashboard.services.account_actions import AccountActions, auth_error_message
from tests.services.fakes import RecordingSession, UntouchableSession


def _form(name="Ada Lovelace", email="ada@nextmail.com", password="123456"):
    return {"name": name, "email": email, "password": password}


async def _count_users(test_db) -> int:
    return (await test_db.execute(select(func.count()).select_from(User))).scalar_one()


# ─── register ────────────────────────────────────────────────────

async def test_register_password_of_five_rejected_before_db():
    result = await AccountActions(UntouchableSession()).register(_form(password="12345"))
    assert result.phase == SubmissionPhase.REJECTED
    assert result.message == messages.REGISTER_INVALID
    assert result.errors is None


async def test_register_password_of_six_hashes_and_inserts(test_db):
    result = await AccountActions(test_db).register(_form(password="123456"))

    assert result.ok
    assert result.redirect_to == "/login"
    user = (await test_db.execute(select(User))).scalar_one()
    assert user.email == "ada@nextmail.com"
    assert user.password != "123456"
    assert bcrypt.checkpw(b"123456", user.password.encode())


async def test_register_existing_email_inserts_nothing(test_db, seed_user):
    before = await _count_users(test_db)
    result = await AccountActions(test_db).register(_form(email=seed_user.email))

    assert result.phase == SubmissionPhase.FAILED
    assert result.message == messages.REGISTER_DUPLICATE
    assert result.redirect_to is None
    assert await _count_users(test_db) == before


async def test_register_unique_violation_on_insert_reports_duplicate():
    race = IntegrityError(
        "INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed: users.email"),
    )
    db = RecordingSession(fail_with=race, fail_at=1)
    result = await AccountActions(db, settings=Settings(bcrypt_rounds=4, _env_file=None)).register(_form())

    assert result.message == messages.REGISTER_DUPLICATE
    assert isinstance(result.error, DuplicateRecordError)
    assert db.rollbacks == 1
    assert db.commits == 0


async def test_register_database_error_is_generic_and_logged(caplog):
    db = RecordingSession(fail_with=OperationalError("SELECT", {}, Exception("down")))
    with caplog.at_level(logging.ERROR):
        result = await AccountActions(db).register(_form())

    assert result.message == messages.REGISTER_DB_ERROR
    assert "Registration Error" in caplog.text


async def test_register_uses_configured_cost_factor(test_db):
    settings = Settings(bcrypt_rounds=10, _env_file=None)
    await AccountActions(test_db, settings=settings).register(_form())
    user = (await test_db.execute(select(User))).scalar_one()
    assert user.password.startswith("$2b$10$")


# ─── authenticate ────────────────────────────────────────────────

def _raising(exc: Exception):
    async def sign_in(provider_name, credentials):
        raise exc
    return sign_in


async def test_authenticate_credentials_mismatch():
    actions = AccountActions(None, _raising(AuthenticationError(AuthErrorType.CREDENTIALS_SIGNIN)))
    result = await actions.authenticate({"email": "a@b.co", "password": "nope"})
    assert result.message == "Invalid credentials."
    assert result.redirect_to is None


@pytest.mark.parametrize("error_type", [
    AuthErrorType.CALLBACK_ROUTE_ERROR,
    AuthErrorType.INVALID_PROVIDER,
    AuthErrorType.CONFIGURATION,
])
async def test_authenticate_other_auth_errors_are_generic(error_type):
    actions = AccountActions(None, _raising(AuthenticationError(error_type)))
    result = await actions.authenticate({})
    assert result.message == "Something went wrong."


async def test_authenticate_non_auth_exception_propagates_unmodified():
    original = ConnectionError("auth backend unreachable")
    actions = AccountActions(None, _raising(original))
    with pytest.raises(ConnectionError) as exc:
        await actions.authenticate({})
    assert exc.value is original


async def test_authenticate_success_redirects_to_dashboard():
    calls = []

    async def sign_in(provider_name, credentials):
        calls.append((provider_name, dict(credentials)))

    form = {"email": "user@nextmail.com", "password": "123456"}
    result = await AccountActions(None, sign_in).authenticate(form)

    assert result.ok
    assert result.redirect_to == "/dashboard"
    assert calls == [("credentials", form)]


def test_auth_error_message_mapping():
    assert auth_error_message(
        AuthenticationError(AuthErrorType.CREDENTIALS_SIGNIN),
    ) == messages.INVALID_CREDENTIALS
    assert auth_error_message(
        AuthenticationError(AuthErrorType.CALLBACK_ROUTE_ERROR),
    ) == messages.AUTH_GENERIC
