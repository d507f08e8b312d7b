"""Route Dependencies — signed-in user guard and form body extraction.

Invariants:
    - require_user raises NotAuthenticatedError (→ 303 to login) for anonymous sessions
    - read_form returns text fields only; uploads are dropped before validation
"""

from fastapi import Request

from dashboard.core.domain_types import UserId
from dashboard.core.errors import ErrorContext, NotAuthenticatedError
from dashboard.infrastructure.auth import current_user_id


def require_user(request: Request) -> UserId:
    """Dashboard routes only serve signed-in users."""
    user_id = current_user_id(request.session)
    if user_id is None:
        raise NotAuthenticatedError(ErrorContext(path=request.url.path))
    return user_id


async def read_form(request: Request) -> dict[str, str]:
    """Submitted form as a plain mapping, validated later against an explicit schema."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
