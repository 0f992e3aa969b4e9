"""
Pydantic schemas for organisations.

An organisation owns one products dataset and one sales dataset.  Its
``name`` is part of both dataset names.
"""

from pydantic import BaseModel


class OrganisationRead(BaseModel):
    """Schema for reading an organisation."""

    id: int
    document_id: str
    name: str

    model_config = {
        "from_attributes": True,
    }
