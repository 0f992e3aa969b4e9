"""
Authentication endpoint for API v1.

Cashiers exchange their e‑mail and password for a bearer token which
every products and sales route requires.
"""

from fastapi import APIRouter, HTTPException, status

from cashier_api.app.core.security import create_access_token
from cashier_api.app.schemas.user import Token, UserLogin
from cashier_api.app.services.organisation_service import OrganisationService


router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin) -> Token:
    """Authenticate a user and return an access token."""
    user = await OrganisationService.authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return Token(access_token=create_access_token({"sub": user.email}))
