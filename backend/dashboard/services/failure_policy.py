"""Failure Policy — per-operation decision whether a persistence failure reaches the user.

Invariants:
    - create/update/register always SURFACE their failures
    - delete follows settings.delete_failure_policy (SUPPRESS by default)
    - A suppressed failure is still logged by the handler; it just carries no message
"""

from dashboard.config import Settings
from dashboard.core.domain_types import ActionKind, FailurePolicy

DEFAULT_POLICIES: dict[ActionKind, FailurePolicy] = {
    ActionKind.CREATE_INVOICE: FailurePolicy.SURFACE,
    ActionKind.UPDATE_INVOICE: FailurePolicy.SURFACE,
    ActionKind.DELETE_INVOICE: FailurePolicy.SUPPRESS,
    ActionKind.REGISTER: FailurePolicy.SURFACE,
}


def failure_policies(settings: Settings) -> dict[ActionKind, FailurePolicy]:
    policies = dict(DEFAULT_POLICIES)
    policies[ActionKind.DELETE_INVOICE] = FailurePolicy(settings.delete_failure_policy)
    return policies


def reported_message(policy: FailurePolicy, message: str) -> str | None:
    """Message to hand back to the caller under the given policy."""
    return message if policy == FailurePolicy.SURFACE else None
