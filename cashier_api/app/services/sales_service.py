"""
Service layer for the sales ledger.

Completed sales live in the organisation's ``<name>_sales`` dataset,
keyed by the sale's timestamp (epoch milliseconds) as a string.  The
key doubles as transaction id and recency marker; ``id`` and
``timestamp`` are therefore stripped from the stored value and put back
when the ledger is listed.  Entries are never changed once written.

Recording a sale also bumps ``sold`` on every referenced product.  Both
dataset writes happen in one ``unit_of_work`` so a sale is never stored
without its sold counts, or the other way round.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from cashier_api.app.core.db import get_connection, unit_of_work
from cashier_api.app.core.errors import ConflictError, ValidationError
from cashier_api.app.schemas.organisation import OrganisationRead
from cashier_api.app.services.dataset_repository import PRODUCTS, SALES, DatasetRepository
from cashier_api.app.services.product_service import ProductCatalogService


logger = logging.getLogger(__name__)

# Derivable from the dataset key.
_KEY_FIELDS = ("id", "timestamp")


class SalesLedgerService:
    """Append and list sales transactions."""

    @staticmethod
    def transaction_key(timestamp: Any) -> str:
        if isinstance(timestamp, float) and timestamp.is_integer():
            timestamp = int(timestamp)
        return str(timestamp)

    @staticmethod
    def _key_to_timestamp(key: str) -> Optional[int]:
        try:
            return int(key)
        except ValueError:
            return None

    @classmethod
    def append_transaction(cls, data: Dict[str, Any], transaction: Dict[str, Any]) -> Dict[str, Any]:
        """Return a new sales mapping with ``transaction`` as its first entry.

        The newest sale is stored first so that listing the dataset in
        stored order yields the most recent sales first.
        """
        if (
            not isinstance(transaction, dict)
            or transaction.get("timestamp") is None
            or not isinstance(transaction.get("products"), list)
        ):
            raise ValidationError("Invalid transaction data", field="transaction")
        key = cls.transaction_key(transaction["timestamp"])
        if key in data:
            raise ConflictError(f"Transaction {key} already exists")

        stored = {k: v for k, v in transaction.items() if k not in _KEY_FIELDS}
        new_data = {key: stored}
        new_data.update(data)
        return new_data

    @classmethod
    def list_transactions(cls, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Rebuild ``id`` and ``timestamp`` from the keys, keeping stored order."""
        sales = []
        for key, value in data.items():
            entry = dict(value) if isinstance(value, dict) else {}
            entry["id"] = key
            entry["timestamp"] = cls._key_to_timestamp(key)
            sales.append(entry)
        return sales

    @classmethod
    async def record_sale(cls, organisation: OrganisationRead, transaction: Dict[str, Any]) -> str:
        """Store a sale and update sold counters; return the transaction key."""
        with unit_of_work() as conn:
            repo = DatasetRepository(conn)
            sales = repo.resolve(organisation, SALES)
            new_sales = cls.append_transaction(sales.data, transaction)
            repo.replace(sales.id, new_sales, expected_version=sales.version)

            # No catalog yet means no product to bump; the sale is kept anyway.
            products = repo.find(organisation, PRODUCTS)
            if products is not None and ProductCatalogService.apply_sale(products.data, transaction["products"]):
                repo.replace(products.id, products.data, expected_version=products.version)
        key = cls.transaction_key(transaction["timestamp"])
        logger.info(
            "Organisation %s recorded sale %s with %d line(s)",
            organisation.id,
            key,
            len(transaction["products"]),
        )
        return key

    @classmethod
    async def list_sales(cls, organisation: OrganisationRead) -> List[Dict[str, Any]]:
        """Return the organisation's sales; an absent ledger is empty, not created."""
        conn = get_connection()
        try:
            dataset = DatasetRepository(conn).find(organisation, SALES)
        finally:
            conn.close()
        if dataset is None:
            return []
        return cls.list_transactions(dataset.data)
