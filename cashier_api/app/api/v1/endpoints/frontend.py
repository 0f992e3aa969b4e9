"""
Legacy routes used by the point‑of‑sale frontend.

The frontend was written against ``/frontend/<action>`` paths.  The
same handlers as in ``products`` and ``sales`` are registered here so
both path styles keep working.
"""

from fastapi import APIRouter, status

from cashier_api.app.api.v1.endpoints import products, sales
from cashier_api.app.schemas.product import MessageResponse, ProductListResponse, ProductResponse
from cashier_api.app.schemas.sale import SalesListResponse


router = APIRouter()

router.add_api_route("/getProducts", products.list_products, methods=["GET"], response_model=ProductListResponse)
router.add_api_route(
    "/addProduct",
    products.add_product,
    methods=["POST"],
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
router.add_api_route("/editProduct", products.edit_product, methods=["PUT"], response_model=ProductResponse)
router.add_api_route("/deleteProduct", products.delete_product, methods=["POST"], response_model=MessageResponse)
router.add_api_route("/saveSale", sales.save_sale, methods=["POST"], response_model=MessageResponse)
router.add_api_route("/getSales", sales.list_sales, methods=["GET"], response_model=SalesListResponse)
