"""Invoice Actions — create, update and delete handlers for the invoice forms.

Invariants:
    - Validation runs before any statement; a rejected form never touches the database
    - Each successful mutation revalidates the invoices path exactly once
    - create/update redirect to the invoices path on success only
    - update of a missing row fails with UPDATE_NOT_FOUND (no invalidation, no redirect)
    - delete never raises; its failures are logged and reported per failure policy

Design Decisions:
    - SQLAlchemy Core insert/update/delete: every value is a bound parameter
    - One statement, one commit: no multi-statement transactions
    - Handlers return ActionResult instead of raising, the route decides the HTTP shape
"""

import logging
from typing import Any, Mapping

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.config import Settings, get_settings
from dashboard.core import messages
from dashboard.core.boundary_protocols import PathInvalidator
from dashboard.core.domain_types import (
    ActionKind, parse_invoice_id, to_minor_units, today_utc,
)
from dashboard.core.errors import (
    ErrorContext, FormValidationError, PersistenceError, ResourceNotFoundError,
)
from dashboard.core.submission import ActionResult, Submission, SubmissionPhase
from dashboard.infrastructure.database import translate_db_error
from dashboard.models.invoice import Invoice
from dashboard.schemas.forms import InvoiceForm, parse_form
from dashboard.services.failure_policy import failure_policies, reported_message

logger = logging.getLogger(__name__)


class InvoiceActions:
    """Form handlers for invoice mutations."""

    def __init__(
        self,
        db: AsyncSession,
        cache: PathInvalidator,
        settings: Settings | None = None,
    ):
        self.db = db
        self.cache = cache
        self.settings = settings or get_settings()
        self.policies = failure_policies(self.settings)

    async def create_invoice(self, form: Mapping[str, Any]) -> ActionResult:
        """Validate, insert one invoice, revalidate and redirect to the list."""
        submission = Submission(ActionKind.CREATE_INVOICE.value)
        submission.advance(SubmissionPhase.VALIDATING)
        try:
            data = parse_form(InvoiceForm, form, messages.CREATE_INVALID)
        except FormValidationError as e:
            logger.info(
                "Create invoice rejected", extra={"action": submission.action},
            )
            return submission.reject(e.message, e.fields, e)

        submission.advance(SubmissionPhase.PERSISTING)
        stmt = insert(Invoice).values(
            customer_id=data.customer_id,
            amount=to_minor_units(data.amount),
            status=data.status.value,
            date=today_utc(),
        )
        try:
            await self._execute(stmt, "insert")
        except PersistenceError as e:
            return submission.fail(messages.CREATE_DB_ERROR, e)
        return self._commit_with_redirect(submission)

    async def update_invoice(
        self, invoice_id: str, form: Mapping[str, Any],
    ) -> ActionResult:
        """Validate, update customer/amount/status of one invoice, revalidate and redirect."""
        submission = Submission(ActionKind.UPDATE_INVOICE.value)
        submission.advance(SubmissionPhase.VALIDATING)
        try:
            data = parse_form(InvoiceForm, form, messages.UPDATE_INVALID)
        except FormValidationError as e:
            logger.info(
                "Update invoice rejected",
                extra={"action": submission.action, "invoice_id": invoice_id},
            )
            return submission.reject(e.message, e.fields, e)

        submission.advance(SubmissionPhase.PERSISTING)
        parsed_id = parse_invoice_id(invoice_id)
        if parsed_id is None:
            return submission.fail(
                messages.UPDATE_NOT_FOUND, self._not_found(invoice_id),
            )

        stmt = (
            update(Invoice)
            .where(Invoice.id == parsed_id)
            .values(
                customer_id=data.customer_id,
                amount=to_minor_units(data.amount),
                status=data.status.value,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._execute(stmt, "update")
        except PersistenceError as e:
            return submission.fail(messages.UPDATE_DB_ERROR, e)

        if result.rowcount == 0:
            logger.warning(
                f"Invoice {invoice_id} not found for update",
                extra={"invoice_id": invoice_id},
            )
            return submission.fail(
                messages.UPDATE_NOT_FOUND, self._not_found(invoice_id),
            )
        return self._commit_with_redirect(submission)

    async def delete_invoice(self, invoice_id: str) -> ActionResult:
        """Best-effort delete. Missing ids are a silent no-op."""
        submission = Submission(ActionKind.DELETE_INVOICE.value)
        policy = self.policies[ActionKind.DELETE_INVOICE]
        submission.advance(SubmissionPhase.VALIDATING)

        parsed_id = parse_invoice_id(invoice_id)
        if parsed_id is None:
            logger.error(
                f"Cannot delete invoice: malformed id {invoice_id!r}",
                extra={"invoice_id": invoice_id, "operation": "delete"},
            )
            return submission.reject(
                reported_message(policy, messages.DELETE_DB_ERROR),
                error=self._not_found(invoice_id),
            )

        submission.advance(SubmissionPhase.PERSISTING)
        stmt = (
            delete(Invoice)
            .where(Invoice.id == parsed_id)
            .execution_options(synchronize_session=False)
        )
        try:
            await self._execute(stmt, "delete")
        except PersistenceError as e:
            return submission.fail(
                reported_message(policy, messages.DELETE_DB_ERROR), e,
            )

        self.cache.revalidate_path(self.settings.invoices_path)
        return submission.commit(invalidated=[self.settings.invoices_path])

    # ─── Helpers ──────────────────────────────────────────────────

    async def _execute(self, stmt, operation: str):
        """Run one statement in its own commit; map driver errors to PersistenceError."""
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result
        except SQLAlchemyError as e:
            await self.db.rollback()
            error = translate_db_error(e, operation)
            logger.error(
                f"Invoice {operation} failed: {e}",
                extra={"error_code": error.code, "operation": operation},
            )
            raise error from e

    def _commit_with_redirect(self, submission: Submission) -> ActionResult:
        path = self.settings.invoices_path
        self.cache.revalidate_path(path)
        return submission.commit(redirect_to=path, invalidated=[path])

    @staticmethod
    def _not_found(invoice_id: str) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            "Invoice", invoice_id, ErrorContext(resource_id=invoice_id),
        )
