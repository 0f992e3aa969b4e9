"""
Pydantic schemas for sales transactions.

A transaction is keyed by its ``timestamp`` (epoch milliseconds) in
the organisation's sales dataset.  Each line in ``products`` refers to
a product by its catalog key (the product name) through ``productId``.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TransactionItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    product_id: Optional[Any] = Field(None, alias="productId")
    quantity: Optional[Union[int, float]] = None


class TransactionPayload(BaseModel):
    """A completed sale as sent by the till."""

    model_config = ConfigDict(extra="allow")

    id: Optional[Any] = None
    timestamp: Optional[int] = None
    products: Optional[List[TransactionItem]] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class SaleCreateRequest(BaseModel):
    transaction: Optional[TransactionPayload] = None


class SalesListResponse(BaseModel):
    sales: List[Dict[str, Any]]
