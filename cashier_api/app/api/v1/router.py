"""
Top‑level router for version 1 of the API.

This router aggregates the auth, products and sales routers plus the
legacy ``/frontend`` aliases under a unified prefix.
"""

from fastapi import APIRouter

from .endpoints import auth, frontend, products, sales

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(sales.router, prefix="/sales", tags=["sales"])
# Same handlers under the paths the original frontend calls
# (e.g. ``GET /frontend/getProducts``).
router.include_router(frontend.router, prefix="/frontend", tags=["frontend"])
