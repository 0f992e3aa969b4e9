"""
Pydantic schemas for catalog products.

A product is stored under its name inside the organisation's
products dataset.  The request schemas validate the handful of fields
the catalog rules depend on (``name``, ``price``, ``stock`` batches
with a numeric ``quantity``) and keep every other client field as is.
``price`` is untyped here: the catalog service decides whether a
missing, ``null`` or empty price is acceptable.  ``barcode`` is passed
through as sent, string or number.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StockBatch(BaseModel):
    """One delivered lot of a product.  Only ``quantity`` is interpreted."""

    model_config = ConfigDict(extra="allow")

    quantity: Optional[Union[int, float]] = None


class ProductPayload(BaseModel):
    """Product fields as sent by the client."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[Any] = None
    name: Optional[str] = None
    barcode: Any = None
    price: Any = None
    buy_price: Any = Field(None, alias="buyPrice")
    stock: Optional[List[StockBatch]] = None
    # Accepted for compatibility but always overwritten by the server.
    sold: Any = None

    def to_document(self) -> Dict[str, Any]:
        """Return the fields the client actually sent, with wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ProductRead(BaseModel):
    """A catalog entry as listed, including derived stock figures."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    barcode: Any = ""
    price: Any = 0
    buy_price: Any = Field(0, alias="buyPrice")
    sold: Union[int, float] = 0
    stock: Any = Field(default_factory=list)
    available_stock: Union[int, float] = Field(0, alias="availableStock")


class ProductCreateRequest(BaseModel):
    product: Optional[ProductPayload] = None


class ProductUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_name: Optional[str] = Field(None, alias="oldName")
    product: Optional[ProductPayload] = None


class ProductDeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_name: Optional[str] = Field(None, alias="productName")


class ProductListResponse(BaseModel):
    products: List[ProductRead]


class ProductResponse(BaseModel):
    product: Dict[str, Any]


class MessageResponse(BaseModel):
    message: str
