"""Submission Lifecycle — pure state machine and result type shared by every action handler.

Invariants:
    - Every submission starts IDLE and moves idle → validating → (rejected | persisting)
      → (failed | committed)
    - REJECTED, FAILED and COMMITTED are terminal for one submission
    - Only COMMITTED results carry redirect_to; failures never navigate

Design Decisions:
    - Explicit transition table over implicit ordering: illegal moves raise immediately
    - ActionResult.to_state() mirrors the form-state payload the UI renders
      ({"errors": ..., "message": ...})
"""

from dataclasses import dataclass, field
from enum import Enum

from dashboard.core.errors import DashboardError


class SubmissionPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PERSISTING = "persisting"
    FAILED = "failed"
    COMMITTED = "committed"


TERMINAL_PHASES = frozenset({
    SubmissionPhase.REJECTED, SubmissionPhase.FAILED, SubmissionPhase.COMMITTED,
})

_TRANSITIONS: dict[SubmissionPhase, frozenset[SubmissionPhase]] = {
    SubmissionPhase.IDLE: frozenset({SubmissionPhase.VALIDATING}),
    SubmissionPhase.VALIDATING: frozenset({
        SubmissionPhase.REJECTED, SubmissionPhase.PERSISTING,
    }),
    SubmissionPhase.PERSISTING: frozenset({
        SubmissionPhase.FAILED, SubmissionPhase.COMMITTED,
    }),
}


class InvalidTransitionError(RuntimeError):
    """Raised when a handler skips or repeats a lifecycle step."""


def can_transition(current: SubmissionPhase, target: SubmissionPhase) -> bool:
    return target in _TRANSITIONS.get(current, frozenset())


@dataclass
class ActionResult:
    """Outcome of one form submission."""
    phase: SubmissionPhase
    message: str | None = None
    errors: dict[str, list[str]] | None = None
    redirect_to: str | None = None
    invalidated: list[str] = field(default_factory=list)
    error: DashboardError | None = None

    @property
    def ok(self) -> bool:
        return self.phase == SubmissionPhase.COMMITTED

    @property
    def surfaced(self) -> bool:
        """Whether there is anything to show the user (suppressed failures carry nothing)."""
        return bool(self.message or self.errors)

    def to_state(self) -> dict:
        return {"errors": self.errors, "message": self.message}


class Submission:
    """Tracks one submission through the lifecycle and builds its result."""

    def __init__(self, action: str):
        self.action = action
        self.phase = SubmissionPhase.IDLE

    @property
    def finished(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def advance(self, target: SubmissionPhase) -> None:
        if self.finished:
            raise InvalidTransitionError(
                f"{self.action}: already {self.phase.value}",
            )
        if not can_transition(self.phase, target):
            raise InvalidTransitionError(
                f"{self.action}: cannot move from {self.phase.value} to {target.value}",
            )
        self.phase = target

    def reject(
        self,
        message: str | None,
        errors: dict[str, list[str]] | None = None,
        error: DashboardError | None = None,
    ) -> ActionResult:
        self.advance(SubmissionPhase.REJECTED)
        return ActionResult(self.phase, message=message, errors=errors, error=error)

    def fail(
        self, message: str | None, error: DashboardError | None = None,
    ) -> ActionResult:
        self.advance(SubmissionPhase.FAILED)
        return ActionResult(self.phase, message=message, error=error)

    def commit(
        self, redirect_to: str | None = None, invalidated: list[str] | None = None,
    ) -> ActionResult:
        self.advance(SubmissionPhase.COMMITTED)
        return ActionResult(
            self.phase, redirect_to=redirect_to, invalidated=invalidated or [],
        )
