"""Boundary Protocols — contracts between action handlers and the shell around them.

Invariants:
    - Action handlers depend on these Protocols, never on concrete cache/auth classes
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - SignIn is a callable Protocol: Authenticator.sign_in is passed as a bound method
"""

from typing import Any, Mapping, Protocol


class PathInvalidator(Protocol):
    """Marks cached rendered output for a path as stale."""
    def revalidate_path(self, path: str) -> None: ...


class SignIn(Protocol):
    """Credential check delegated to the auth subsystem.

    Returns on success; raises AuthenticationError (with a `type`) on failure.
    """
    async def __call__(
        self, provider_name: str, credentials: Mapping[str, Any],
    ) -> Any: ...
