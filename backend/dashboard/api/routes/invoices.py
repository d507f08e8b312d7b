"""Invoice Routes — form endpoints for creating, editing and deleting invoices.

Invariants:
    - Every route requires a signed-in user (require_user)
    - Routes only read the form and delegate to InvoiceActions; no SQL here
    - delete answers 204 whether or not the row existed
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.dependencies import read_form, require_user
from dashboard.api.routes.form_responses import render_result
from dashboard.config import get_settings
from dashboard.core.domain_types import UserId
from dashboard.infrastructure.database import get_db
from dashboard.infrastructure.page_cache import PageCache, get_page_cache
from dashboard.services.invoice_actions import InvoiceActions

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/dashboard/invoices", tags=["invoices"],
    dependencies=[Depends(require_user)],
)


def get_invoice_actions(
    db: AsyncSession = Depends(get_db),
    cache: PageCache = Depends(get_page_cache),
) -> InvoiceActions:
    return InvoiceActions(db, cache, get_settings())


@router.post("")
async def create_invoice(
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    result = await actions.create_invoice(await read_form(request))
    return render_result(result)


@router.post("/{invoice_id}/edit")
async def update_invoice(
    invoice_id: str,
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    result = await actions.update_invoice(invoice_id, await read_form(request))
    return render_result(result)


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: str,
    actions: InvoiceActions = Depends(get_invoice_actions),
    user_id: UserId = Depends(require_user),
):
    logger.info(
        f"Invoice delete requested by {user_id}",
        extra={"invoice_id": invoice_id},
    )
    result = await actions.delete_invoice(invoice_id)
    return render_result(result)
