import asyncio
from concurrent.futures import ThreadPoolExecutor

from cashier_api.app.core.db import get_connection
from cashier_api.app.services.product_service import ProductCatalogService
from cashier_api.app.services.sales_service import SalesLedgerService


WORKERS = 20


def run_in_threads(fn, count=WORKERS):
    with ThreadPoolExecutor(max_workers=count) as pool:
        futures = [pool.submit(fn, i) for i in range(count)]
        return [future.result() for future in futures]


def count_datasets(name):
    conn = get_connection()
    try:
        return conn.execute("SELECT COUNT(*) AS n FROM datasets WHERE name = ?", (name,)).fetchone()["n"]
    finally:
        conn.close()


def test_parallel_first_adds_keep_every_product(organisation):
    def add(i):
        return asyncio.run(ProductCatalogService.create_product(organisation, {"name": f"Item {i}", "price": i}))

    run_in_threads(add)

    products = asyncio.run(ProductCatalogService.get_products(organisation))
    assert sorted(p["name"] for p in products) == sorted(f"Item {i}" for i in range(WORKERS))
    assert count_datasets("Acme_products") == 1


def test_parallel_sales_do_not_lose_sold_counts(organisation):
    asyncio.run(
        ProductCatalogService.create_product(organisation, {"name": "Widget", "price": 1, "stock": [{"quantity": 100}]})
    )

    def sell(i):
        transaction = {"timestamp": 1700000000000 + i, "products": [{"productId": "Widget", "quantity": 1}]}
        return asyncio.run(SalesLedgerService.record_sale(organisation, transaction))

    keys = run_in_threads(sell)

    assert len(set(keys)) == WORKERS
    widget = asyncio.run(ProductCatalogService.get_products(organisation))[0]
    assert widget["sold"] == WORKERS
    assert widget["availableStock"] == 100 - WORKERS
    assert len(asyncio.run(SalesLedgerService.list_sales(organisation))) == WORKERS
    assert count_datasets("Acme_sales") == 1
    assert count_datasets("Acme_products") == 1
