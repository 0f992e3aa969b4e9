"""
Pydantic models for user authentication.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserLogin(BaseModel):
    """Credentials for ``POST /auth/login``."""

    email: str = Field(..., examples=["cashier@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(BaseModel):
    """Schema for reading a user."""

    id: int
    email: str
    full_name: Optional[str] = None
    organisation_id: Optional[int] = None
    disabled: bool = False


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
