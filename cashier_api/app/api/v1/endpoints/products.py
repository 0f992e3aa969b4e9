"""
Product catalog endpoints for API v1.

All routes operate on the products dataset of the caller's
organisation.  Validation, missing products and name conflicts are
raised by ``ProductCatalogService`` and mapped to 400/404/409 by the
application's exception handlers.
"""

from fastapi import APIRouter, Depends, status

from cashier_api.app.core.security import get_current_organisation
from cashier_api.app.schemas.organisation import OrganisationRead
from cashier_api.app.schemas.product import (
    MessageResponse,
    ProductCreateRequest,
    ProductDeleteRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from cashier_api.app.services.product_service import ProductCatalogService


router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(organisation: OrganisationRead = Depends(get_current_organisation)) -> dict:
    """List products with their ``availableStock`` in catalog order."""
    products = await ProductCatalogService.get_products(organisation)
    return {"products": products}


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product(
    body: ProductCreateRequest,
    organisation: OrganisationRead = Depends(get_current_organisation),
) -> dict:
    """Add a product.  ``sold`` always starts at zero."""
    product = body.product.to_document() if body.product else {}
    created = await ProductCatalogService.create_product(organisation, product)
    return {"product": created}


@router.put("", response_model=ProductResponse)
async def edit_product(
    body: ProductUpdateRequest,
    organisation: OrganisationRead = Depends(get_current_organisation),
) -> dict:
    """Replace a product, optionally renaming it from ``oldName``."""
    product = body.product.to_document() if body.product else {}
    updated = await ProductCatalogService.update_product(organisation, body.old_name, product)
    return {"product": updated}


@router.post("/delete", response_model=MessageResponse)
async def delete_product(
    body: ProductDeleteRequest,
    organisation: OrganisationRead = Depends(get_current_organisation),
) -> dict:
    await ProductCatalogService.remove_product(organisation, body.product_name)
    return {"message": "Product deleted successfully"}
