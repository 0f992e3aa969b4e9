"""
Sales ledger endpoints for API v1.
"""

from fastapi import APIRouter, Depends

from cashier_api.app.core.security import get_current_organisation
from cashier_api.app.schemas.organisation import OrganisationRead
from cashier_api.app.schemas.product import MessageResponse
from cashier_api.app.schemas.sale import SaleCreateRequest, SalesListResponse
from cashier_api.app.services.sales_service import SalesLedgerService


router = APIRouter()


@router.post("", response_model=MessageResponse)
async def save_sale(
    body: SaleCreateRequest,
    organisation: OrganisationRead = Depends(get_current_organisation),
) -> dict:
    """Record a completed sale and add its quantities to the products' ``sold``.

    Lines referring to unknown products are ignored; the sale itself is
    still recorded.
    """
    transaction = body.transaction.to_document() if body.transaction else {}
    await SalesLedgerService.record_sale(organisation, transaction)
    return {"message": "Transaction saved successfully"}


@router.get("", response_model=SalesListResponse)
async def list_sales(organisation: OrganisationRead = Depends(get_current_organisation)) -> dict:
    """List recorded sales, most recent first."""
    sales = await SalesLedgerService.list_sales(organisation)
    return {"sales": sales}
