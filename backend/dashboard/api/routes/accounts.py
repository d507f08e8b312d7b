"""Account Routes — register, login and logout form endpoints.

Invariants:
    - login builds an Authenticator over the request session; a successful sign-in
      leaves user_id in the signed session cookie
    - logout always clears the session and redirects to the login path
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.dependencies import read_form
from dashboard.api.routes.form_responses import render_result
from dashboard.config import get_settings
from dashboard.infrastructure.auth import Authenticator, CredentialsProvider
from dashboard.infrastructure.database import get_db
from dashboard.services.account_actions import AccountActions

router = APIRouter(tags=["accounts"])


@router.post("/register")
async def register(request: Request, db: AsyncSession = Depends(get_db)):
    actions = AccountActions(db, settings=get_settings())
    result = await actions.register(await read_form(request))
    return render_result(result)


@router.post("/login")
async def login(request: Request, db: AsyncSession = Depends(get_db)):
    authenticator = Authenticator([CredentialsProvider(db)], request.session)
    actions = AccountActions(db, authenticator.sign_in, get_settings())
    result = await actions.authenticate(await read_form(request))
    return render_result(result)


@router.post("/logout")
async def logout(request: Request):
    Authenticator([], request.session).sign_out()
    return RedirectResponse(
        get_settings().login_path, status_code=status.HTTP_303_SEE_OTHER,
    )
