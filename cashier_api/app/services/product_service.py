"""
Service layer for the product catalog.

The catalog of an organisation is the ``data`` object of its
``<name>_products`` dataset: product name -> product fields.  The name
is the product's only identity and is never stored inside the value.
``sold`` belongs to the server; clients can neither set it on creation
nor change it through an edit, only sales move it.

The classmethods taking ``data`` are the pure rules and mutate the
dict they are given.  The ``async`` methods bind them to an
organisation and run each one as a single read‑modify‑write inside
``unit_of_work``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Union

from cashier_api.app.core.db import unit_of_work
from cashier_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from cashier_api.app.schemas.organisation import OrganisationRead
from cashier_api.app.services.dataset_repository import PRODUCTS, DatasetRepository


logger = logging.getLogger(__name__)

Number = Union[int, float]

# Stored once as the dataset key.
_IDENTITY_FIELDS = ("id", "name")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ProductCatalogService:
    """Business rules for listing, adding, editing and deleting products."""

    @staticmethod
    def total_stock(stock: Any) -> Number:
        """Sum of batch quantities; anything that is not a list counts as zero."""
        if not isinstance(stock, list):
            return 0
        total: Number = 0
        for batch in stock:
            quantity = batch.get("quantity") if isinstance(batch, dict) else None
            if _is_number(quantity):
                total += quantity
        return total

    @classmethod
    def list_products(cls, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return every product with its derived ``availableStock``.

        Products come out in the dataset's insertion order.
        """
        products = []
        for name, info in data.items():
            if not isinstance(info, dict):
                info = {}
            stock = info.get("stock") or []
            sold = info.get("sold") or 0
            products.append(
                {
                    "id": name,
                    "name": name,
                    "barcode": info.get("barcode") or "",
                    "price": info.get("price") or 0,
                    "buyPrice": info.get("buyPrice") or 0,
                    "sold": sold,
                    "stock": stock,
                    "availableStock": cls.total_stock(stock) - sold,
                }
            )
        return products

    @staticmethod
    def _require_price(product: Dict[str, Any]) -> None:
        price = product.get("price")
        if price is None or price == "":
            raise ValidationError("Sell price is required", field="price")

    @staticmethod
    def _stored_fields(product: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in product.items() if k not in _IDENTITY_FIELDS}

    @classmethod
    def add_product(cls, data: Dict[str, Any], product: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new product into ``data`` and return it with ``id``/``name``."""
        if not product or not product.get("name"):
            raise ValidationError("Product name is required", field="name")
        cls._require_price(product)
        name = product["name"]
        if name in data:
            raise ConflictError("Product with this name already exists")

        stored = cls._stored_fields(product)
        stored["sold"] = 0
        if stored.get("stock") is None:
            stored["stock"] = []
        data[name] = stored
        return {**stored, "id": name, "name": name}

    @classmethod
    def edit_product(cls, data: Dict[str, Any], old_name: str, product: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the product stored under ``old_name``, possibly renaming it.

        The stored ``sold`` count survives the edit whatever the client
        sent.  A rename drops the old key and appends the new one, so
        the product moves to the end of the listing order.
        """
        if not old_name or not product or not product.get("name"):
            raise ValidationError("Invalid data", field="name")
        cls._require_price(product)
        if old_name not in data:
            raise NotFoundError("Product not found")
        new_name = product["name"]
        if new_name != old_name and new_name in data:
            raise ConflictError("Product with new name already exists")

        existing = data[old_name] if isinstance(data[old_name], dict) else {}
        sold = existing.get("sold") or 0
        if new_name != old_name:
            del data[old_name]

        stored = cls._stored_fields(product)
        stored["sold"] = sold
        data[new_name] = stored
        return {**stored, "id": new_name, "name": new_name}

    @staticmethod
    def delete_product(data: Dict[str, Any], name: str) -> None:
        if not name:
            raise ValidationError("Product name is required", field="productName")
        if name not in data:
            raise NotFoundError("Product not found")
        del data[name]

    @staticmethod
    def apply_sale(data: Dict[str, Any], items: Iterable[Dict[str, Any]]) -> bool:
        """Add sold quantities to the referenced products.

        Lines whose ``productId`` is not a key of ``data`` are skipped,
        as are lines without a positive numeric ``quantity``.  Returns
        ``True`` if at least one product changed.
        """
        changed = False
        for item in items or []:
            if not isinstance(item, dict):
                continue
            product_id = item.get("productId")
            quantity = item.get("quantity")
            if not product_id or not _is_number(quantity) or quantity <= 0:
                logger.warning("Skipping sale line without product or quantity: %s", item)
                continue
            key = str(product_id)
            entry = data.get(key)
            if not isinstance(entry, dict):
                logger.warning("Skipping sale line for unknown product %s", key)
                continue
            entry["sold"] = (entry.get("sold") or 0) + quantity
            changed = True
        return changed

    # ------------------------------------------------------------------
    # Organisation-bound operations
    # ------------------------------------------------------------------
    @classmethod
    async def get_products(cls, organisation: OrganisationRead) -> List[Dict[str, Any]]:
        """List the organisation's products, creating the empty dataset on first use."""
        with unit_of_work() as conn:
            dataset = DatasetRepository(conn).resolve(organisation, PRODUCTS)
        return cls.list_products(dataset.data)

    @classmethod
    async def create_product(cls, organisation: OrganisationRead, product: Dict[str, Any]) -> Dict[str, Any]:
        with unit_of_work() as conn:
            repo = DatasetRepository(conn)
            dataset = repo.resolve(organisation, PRODUCTS)
            created = cls.add_product(dataset.data, product)
            repo.replace(dataset.id, dataset.data, expected_version=dataset.version)
        logger.info("Organisation %s added product '%s'", organisation.id, created["name"])
        return created

    @classmethod
    async def update_product(
        cls, organisation: OrganisationRead, old_name: str, product: Dict[str, Any]
    ) -> Dict[str, Any]:
        with unit_of_work() as conn:
            repo = DatasetRepository(conn)
            dataset = repo.resolve(organisation, PRODUCTS)
            updated = cls.edit_product(dataset.data, old_name, product)
            repo.replace(dataset.id, dataset.data, expected_version=dataset.version)
        logger.info("Organisation %s updated product '%s'", organisation.id, old_name)
        return updated

    @classmethod
    async def remove_product(cls, organisation: OrganisationRead, name: str) -> None:
        with unit_of_work() as conn:
            repo = DatasetRepository(conn)
            dataset = repo.resolve(organisation, PRODUCTS)
            cls.delete_product(dataset.data, name)
            repo.replace(dataset.id, dataset.data, expected_version=dataset.version)
        logger.info("Organisation %s deleted product '%s'", organisation.id, name)
