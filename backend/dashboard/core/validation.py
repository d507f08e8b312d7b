"""Form Error Flattening — turns pydantic error lists into per-field message lists.

Invariants:
    - Output keys are the submitted field names (aliases, e.g. customerId)
    - Each field lists a message at most once, in first-seen order
    - A field with a configured message always reports that message, whatever the
      underlying error type (missing, wrong type, out of range)

Design Decisions:
    - Accepts plain error dicts (ValidationError.errors()) so core stays free of pydantic imports
"""

from typing import Iterable, Mapping

ROOT_FIELD = "__root__"


def flatten_field_errors(
    errors: Iterable[Mapping],
    messages: Mapping[str, str] | None = None,
) -> dict[str, list[str]]:
    """Group error messages by top-level field."""
    messages = messages or {}
    fields: dict[str, list[str]] = {}
    for error in errors:
        loc = error.get("loc") or ()
        name = str(loc[0]) if loc else ROOT_FIELD
        message = messages.get(name, error.get("msg", "Invalid value"))
        bucket = fields.setdefault(name, [])
        if message not in bucket:
            bucket.append(message)
    return fields

