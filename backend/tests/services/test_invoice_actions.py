"""Invoice Actions — create/update/delete against SQLite and against recording fakes.

Invariants:
    - Invalid amount/status never reaches the database
    - Valid create stores minor units, revalidates the list once, redirects once
    - Update of a missing invoice fails with a not-found message
    - Delete never surfaces an error under the default policy
"""

import datetime
import logging
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from dashboard.config import Settings
from dashboard.core import messages
from dashboard.core.domain_types import today_utc
from dashboard.core.errors import PersistenceError, ResourceNotFoundError
from dashboard.core.submission import SubmissionPhase
from dashboard.models.invoice import Invoice
from dashboard.services.invoice_actions import InvoiceActions
from tests.services.fakes import RecordingSession, UntouchableSession

INVOICES = "/dashboard/invoices"


def _form(customer_id="c1", amount="10.50", status="paid"):
    return {"customerId": customer_id, "amount": amount, "status": status}


@pytest.fixture
async def seed_invoice(test_db, seed_customer):
    invoice = Invoice(
        customer_id=str(seed_customer.id), amount=15795,
        status="pending", date=datetime.date(2022, 12, 6),
    )
    test_db.add(invoice)
    await test_db.commit()
    await test_db.refresh(invoice)
    return invoice


async def _count_invoices(test_db) -> int:
    return (await test_db.execute(select(func.count()).select_from(Invoice))).scalar_one()


# ─── create ──────────────────────────────────────────────────────

async def test_create_binds_minor_units_and_redirects_once(cache):
    db = RecordingSession()
    result = await InvoiceActions(db, cache).create_invoice(_form())

    assert result.ok
    assert result.redirect_to == INVOICES
    assert cache.revalidated == [INVOICES]
    assert db.commits == 1
    params = db.bound_params()
    assert params["customer_id"] == "c1"
    assert params["amount"] == 1050
    assert params["status"] == "paid"
    assert params["date"] == today_utc()


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "", "0.001", "0.004"])
async def test_create_rejects_bad_amount_without_db(cache, amount):
    result = await InvoiceActions(UntouchableSession(), cache).create_invoice(
        _form(amount=amount),
    )
    assert result.phase == SubmissionPhase.REJECTED
    assert result.errors == {"amount": [messages.AMOUNT_POSITIVE]}
    assert result.message == messages.CREATE_INVALID
    assert result.redirect_to is None
    assert cache.revalidated == []


async def test_create_rejects_unknown_status_without_db(cache):
    result = await InvoiceActions(UntouchableSession(), cache).create_invoice(
        _form(status="overdue"),
    )
    assert result.phase == SubmissionPhase.REJECTED
    assert result.errors == {"status": [messages.STATUS_REQUIRED]}
    assert cache.revalidated == []


async def test_create_persists_row(test_db, cache, seed_customer):
    result = await InvoiceActions(test_db, cache).create_invoice(
        _form(customer_id=str(seed_customer.id), amount="250", status="pending"),
    )
    assert result.ok

    invoice = (await test_db.execute(select(Invoice))).scalar_one()
    assert invoice.amount == 25000
    assert invoice.status == "pending"
    assert invoice.date == today_utc()
    assert invoice.customer_id.replace("-", "") == seed_customer.id.hex


async def test_create_database_error_returns_message(cache, caplog):
    db = RecordingSession(fail_with=OperationalError("INSERT", {}, Exception("down")))
    with caplog.at_level(logging.ERROR):
        result = await InvoiceActions(db, cache).create_invoice(_form())

    assert result.phase == SubmissionPhase.FAILED
    assert result.message == messages.CREATE_DB_ERROR
    assert isinstance(result.error, PersistenceError)
    assert result.redirect_to is None
    assert cache.revalidated == []
    assert db.rollbacks == 1
    assert "Invoice insert failed" in caplog.text


# ─── update ──────────────────────────────────────────────────────

async def test_update_changes_row_and_redirects(test_db, cache, seed_invoice, seed_customer):
    result = await InvoiceActions(test_db, cache).update_invoice(
        str(seed_invoice.id),
        _form(customer_id=str(seed_customer.id), amount="99.99", status="paid"),
    )
    assert result.ok
    assert result.redirect_to == INVOICES
    assert cache.revalidated == [INVOICES]

    await test_db.refresh(seed_invoice)
    assert seed_invoice.amount == 9999
    assert seed_invoice.status == "paid"
    assert seed_invoice.date == datetime.date(2022, 12, 6)


async def test_update_missing_invoice_is_not_found(test_db, cache, seed_customer):
    result = await InvoiceActions(test_db, cache).update_invoice(
        str(uuid.uuid4()), _form(customer_id=str(seed_customer.id)),
    )
    assert result.phase == SubmissionPhase.FAILED
    assert result.message == messages.UPDATE_NOT_FOUND
    assert isinstance(result.error, ResourceNotFoundError)
    assert cache.revalidated == []


async def test_update_malformed_id_is_not_found_without_db(cache):
    result = await InvoiceActions(UntouchableSession(), cache).update_invoice(
        "not-a-uuid", _form(),
    )
    assert result.message == messages.UPDATE_NOT_FOUND


async def test_update_rejects_invalid_form_without_db(cache):
    result = await InvoiceActions(UntouchableSession(), cache).update_invoice(
        str(uuid.uuid4()), _form(amount="-1"),
    )
    assert result.phase == SubmissionPhase.REJECTED
    assert result.message == messages.UPDATE_INVALID


async def test_update_database_error_returns_message(cache):
    db = RecordingSession(fail_with=OperationalError("UPDATE", {}, Exception("down")))
    result = await InvoiceActions(db, cache).update_invoice(str(uuid.uuid4()), _form())
    assert result.message == messages.UPDATE_DB_ERROR
    assert cache.revalidated == []


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_removes_row_and_revalidates(test_db, cache, seed_invoice):
    result = await InvoiceActions(test_db, cache).delete_invoice(str(seed_invoice.id))
    assert result.ok
    assert result.redirect_to is None
    assert cache.revalidated == [INVOICES]
    assert await _count_invoices(test_db) == 0


async def test_delete_missing_id_twice_never_surfaces(test_db, cache):
    actions = InvoiceActions(test_db, cache)
    missing = str(uuid.uuid4())
    first = await actions.delete_invoice(missing)
    second = await actions.delete_invoice(missing)
    assert first.ok and second.ok
    assert not first.surfaced and not second.surfaced


async def test_delete_database_error_is_logged_not_surfaced(cache, caplog):
    db = RecordingSession(fail_with=OperationalError("DELETE", {}, Exception("down")))
    with caplog.at_level(logging.ERROR):
        result = await InvoiceActions(db, cache).delete_invoice(str(uuid.uuid4()))

    assert result.phase == SubmissionPhase.FAILED
    assert not result.surfaced
    assert cache.revalidated == []
    assert "Invoice delete failed" in caplog.text


async def test_delete_malformed_id_not_surfaced(cache):
    result = await InvoiceActions(UntouchableSession(), cache).delete_invoice("42")
    assert not result.ok
    assert not result.surfaced


async def test_delete_failures_surface_when_configured(cache):
    settings = Settings(delete_failure_policy="surface", _env_file=None)
    db = RecordingSession(fail_with=OperationalError("DELETE", {}, Exception("down")))
    result = await InvoiceActions(db, cache, settings).delete_invoice(str(uuid.uuid4()))
    assert result.message == messages.DELETE_DB_ERROR
