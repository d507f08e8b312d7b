"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - InvoiceId and UserId wrap UUIDs parsed from URLs and the session cookie
    - Customer ids stay the submitted text; the database validates them
    - MinorUnits is an integer count of cents, never a float
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and bind to VARCHAR columns without custom encoders
"""

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

InvoiceId = NewType("InvoiceId", UUID)
UserId = NewType("UserId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

MinorUnits = NewType("MinorUnits", int)   # cents


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice states — maps to DB `status` column."""
    PENDING = "pending"
    PAID = "paid"


class FailurePolicy(str, Enum):
    """What an action does with a persistence failure."""
    SURFACE = "surface"
    SUPPRESS = "suppress"


class ActionKind(str, Enum):
    """Operation kinds that carry a failure policy."""
    CREATE_INVOICE = "create_invoice"
    UPDATE_INVOICE = "update_invoice"
    DELETE_INVOICE = "delete_invoice"
    REGISTER = "register"


# ─── Conversions ─────────────────────────────────────────────────

def to_minor_units(amount: Decimal) -> MinorUnits:
    """Dollars → cents, rounding half-up past the second decimal."""
    cents = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return MinorUnits(int(cents))


def today_utc() -> date:
    """Calendar date stamped on new invoices."""
    return datetime.now(timezone.utc).date()


def parse_invoice_id(raw: str) -> InvoiceId | None:
    """Invoice id from a URL segment; None when it is not a UUID."""
    parsed = _parse_uuid(raw)
    return InvoiceId(parsed) if parsed is not None else None


def parse_user_id(raw: str) -> UserId | None:
    """User id stored in the session; None when it is not a UUID."""
    parsed = _parse_uuid(raw)
    return UserId(parsed) if parsed is not None else None


def _parse_uuid(raw: str) -> UUID | None:
    try:
        return UUID(str(raw))
    except ValueError:
        return None
