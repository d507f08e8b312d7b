"""Form Responses — turns an ActionResult into the HTTP response a form submission expects.

Invariants:
    - COMMITTED with redirect_to → 303 See Other to that path
    - COMMITTED without redirect, or a failure with nothing surfaced → 204
    - REJECTED → 400 with form state; FAILED → the error's http_status (503 default)
"""

from fastapi import Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from dashboard.core.submission import ActionResult, SubmissionPhase
from dashboard.schemas.forms import FormState


def render_result(result: ActionResult) -> Response:
    if result.ok:
        if result.redirect_to:
            return RedirectResponse(
                result.redirect_to, status_code=status.HTTP_303_SEE_OTHER,
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if not result.surfaced:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if result.phase == SubmissionPhase.REJECTED:
        status_code = status.HTTP_400_BAD_REQUEST
    elif result.error is not None:
        status_code = result.error.http_status
    else:
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content=FormState(**result.to_state()).model_dump(),
    )
