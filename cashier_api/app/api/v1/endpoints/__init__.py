"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one area (auth, products, sales)
and ``frontend`` re‑exposes the same handlers under the paths the
original point‑of‑sale frontend calls.  The routers are aggregated in
``router.py``.
"""
