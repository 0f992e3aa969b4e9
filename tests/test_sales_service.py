import asyncio

import pytest

from cashier_api.app.core.db import get_connection
from cashier_api.app.core.errors import ConflictError, ValidationError
from cashier_api.app.services.dataset_repository import DatasetRepository
from cashier_api.app.services.product_service import ProductCatalogService
from cashier_api.app.services.sales_service import SalesLedgerService


def test_append_puts_newest_first_and_strips_key_fields():
    existing = {"1600000000000": {"total": 1, "products": []}}
    new_data = SalesLedgerService.append_transaction(
        existing,
        {"id": "tx-1", "timestamp": 1700000000000, "total": 12.5, "products": [{"productId": "Widget", "quantity": 1}]},
    )

    assert list(new_data) == ["1700000000000", "1600000000000"]
    assert new_data["1700000000000"] == {"total": 12.5, "products": [{"productId": "Widget", "quantity": 1}]}


@pytest.mark.parametrize(
    "transaction",
    [
        {"products": []},
        {"timestamp": 1700000000000},
        {"timestamp": 1700000000000, "products": "Widget"},
        None,
    ],
)
def test_append_requires_timestamp_and_products(transaction):
    with pytest.raises(ValidationError):
        SalesLedgerService.append_transaction({}, transaction)


def test_append_refuses_existing_key():
    existing = {"1700000000000": {"products": []}}
    with pytest.raises(ConflictError):
        SalesLedgerService.append_transaction(existing, {"timestamp": 1700000000000, "products": []})


def test_list_round_trips_key_into_id_and_timestamp():
    sales = SalesLedgerService.list_transactions({"1700000000000": {"total": 3, "products": []}})
    assert sales == [{"total": 3, "products": [], "id": "1700000000000", "timestamp": 1700000000000}]


def test_record_sale_updates_sold_counts(organisation):
    asyncio.run(ProductCatalogService.create_product(organisation, {"name": "Widget", "price": 9.99, "stock": [{"quantity": 5}]}))

    asyncio.run(
        SalesLedgerService.record_sale(
            organisation,
            {
                "timestamp": 1700000000000,
                "products": [{"productId": "Widget", "quantity": 3}, {"productId": "Unknown", "quantity": 1}],
            },
        )
    )

    products = asyncio.run(ProductCatalogService.get_products(organisation))
    assert products[0]["sold"] == 3
    assert products[0]["availableStock"] == 2
    sales = asyncio.run(SalesLedgerService.list_sales(organisation))
    assert [s["id"] for s in sales] == ["1700000000000"]


def test_record_sale_is_all_or_nothing(organisation, monkeypatch):
    asyncio.run(ProductCatalogService.create_product(organisation, {"name": "Widget", "price": 1}))

    def broken_apply_sale(data, items):
        raise RuntimeError("products write failed")

    monkeypatch.setattr(ProductCatalogService, "apply_sale", staticmethod(broken_apply_sale))
    with pytest.raises(RuntimeError):
        asyncio.run(
            SalesLedgerService.record_sale(
                organisation, {"timestamp": 1700000000000, "products": [{"productId": "Widget", "quantity": 1}]}
            )
        )

    assert asyncio.run(SalesLedgerService.list_sales(organisation)) == []


def test_list_sales_does_not_create_dataset(organisation):
    assert asyncio.run(SalesLedgerService.list_sales(organisation)) == []

    conn = get_connection()
    try:
        assert DatasetRepository(conn).find_by_name("Acme_sales") is None
    finally:
        conn.close()


def test_record_sale_without_catalog_keeps_sale_only(organisation):
    asyncio.run(
        SalesLedgerService.record_sale(
            organisation, {"timestamp": 1700000000000, "products": [{"productId": "Widget", "quantity": 2}]}
        )
    )

    assert [s["id"] for s in asyncio.run(SalesLedgerService.list_sales(organisation))] == ["1700000000000"]
    conn = get_connection()
    try:
        assert DatasetRepository(conn).find_by_name("Acme_products") is None
    finally:
        conn.close()
