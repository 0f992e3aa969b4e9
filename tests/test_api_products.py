import asyncio

from fastapi.testclient import TestClient

from cashier_api.app.core.security import create_access_token
from cashier_api.app.main import app
from cashier_api.app.services.organisation_service import OrganisationService
from cashier_api.app.services.product_service import ProductCatalogService


def add(client, headers, **product):
    return client.post("/api/v1/products", json={"product": product}, headers=headers)


def test_requires_authentication(client):
    assert client.get("/api/v1/products").status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert client.get("/api/v1/products", headers=bad).status_code == 401


def test_user_without_organisation_is_rejected(client, database):
    asyncio.run(OrganisationService.create_user("drifter@example.com", "pw"))
    headers = {"Authorization": f"Bearer {create_access_token({'sub': 'drifter@example.com'})}"}

    response = client.get("/api/v1/products", headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "User does not have an associated organisation"


def test_add_then_list_scenario(client, auth_headers):
    response = add(client, auth_headers, name="Widget", price=9.99, stock=[{"quantity": 5}])
    assert response.status_code == 201
    assert response.json()["product"] == {
        "price": 9.99,
        "stock": [{"quantity": 5}],
        "sold": 0,
        "id": "Widget",
        "name": "Widget",
    }

    listed = client.get("/api/v1/products", headers=auth_headers)
    assert listed.status_code == 200
    assert listed.json() == {
        "products": [
            {
                "id": "Widget",
                "name": "Widget",
                "barcode": "",
                "price": 9.99,
                "buyPrice": 0,
                "sold": 0,
                "stock": [{"quantity": 5}],
                "availableStock": 5,
            }
        ]
    }


def test_numeric_barcode_is_passed_through(client, auth_headers):
    response = add(client, auth_headers, name="Widget", price=1, barcode=4006381333931)
    assert response.status_code == 201
    assert response.json()["product"]["barcode"] == 4006381333931

    listed = client.get("/api/v1/products", headers=auth_headers).json()["products"]
    assert listed[0]["barcode"] == 4006381333931


def test_list_twice_returns_same_result(client, auth_headers):
    add(client, auth_headers, name="Widget", price=1, stock=[{"quantity": 2}])
    first = client.get("/api/v1/products", headers=auth_headers).json()
    second = client.get("/api/v1/products", headers=auth_headers).json()
    assert first == second


def test_add_validation_and_conflict(client, auth_headers):
    assert add(client, auth_headers, price=1).status_code == 400
    assert add(client, auth_headers, name="Widget", price="").status_code == 400
    assert client.post("/api/v1/products", json={}, headers=auth_headers).status_code == 400

    assert add(client, auth_headers, name="Widget", price=1).status_code == 201
    duplicate = add(client, auth_headers, name="Widget", price=2)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Product with this name already exists"


def test_edit_preserves_sold_and_handles_rename(client, auth_headers, organisation):
    add(client, auth_headers, name="Widget", price=1, stock=[{"quantity": 10}])
    add(client, auth_headers, name="Gadget", price=2)
    client.post(
        "/api/v1/sales",
        json={"transaction": {"timestamp": 1700000000000, "products": [{"productId": "Widget", "quantity": 4}]}},
        headers=auth_headers,
    )

    response = client.put(
        "/api/v1/products",
        json={"oldName": "Widget", "product": {"name": "Widget", "price": 3, "sold": 0, "stock": [{"quantity": 10}]}},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["product"]["sold"] == 4

    same_name = client.put(
        "/api/v1/products",
        json={"oldName": "Gadget", "product": {"name": "Gadget", "price": 5}},
        headers=auth_headers,
    )
    assert same_name.status_code == 200

    conflict = client.put(
        "/api/v1/products",
        json={"oldName": "Widget", "product": {"name": "Gadget", "price": 3}},
        headers=auth_headers,
    )
    assert conflict.status_code == 409

    missing = client.put(
        "/api/v1/products",
        json={"oldName": "Nope", "product": {"name": "Nope", "price": 3}},
        headers=auth_headers,
    )
    assert missing.status_code == 404

    products = asyncio.run(ProductCatalogService.get_products(organisation))
    assert {p["name"]: p["sold"] for p in products} == {"Widget": 4, "Gadget": 0}


def test_delete(client, auth_headers):
    add(client, auth_headers, name="Widget", price=1)

    response = client.post("/api/v1/products/delete", json={"productName": "Widget"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Product deleted successfully"}
    assert client.get("/api/v1/products", headers=auth_headers).json() == {"products": []}

    again = client.post("/api/v1/products/delete", json={"productName": "Widget"}, headers=auth_headers)
    assert again.status_code == 404
    assert again.json()["detail"] == "Product not found"


def test_organisations_do_not_see_each_others_products(client, auth_headers, other_organisation):
    asyncio.run(OrganisationService.create_user("clerk@globex.test", "pw", other_organisation.id))
    globex = {"Authorization": f"Bearer {create_access_token({'sub': 'clerk@globex.test'})}"}

    add(client, auth_headers, name="Widget", price=1)

    assert client.get("/api/v1/products", headers=globex).json() == {"products": []}


def test_legacy_frontend_paths(client, auth_headers):
    created = client.post(
        "/api/v1/frontend/addProduct", json={"product": {"name": "Widget", "price": 1}}, headers=auth_headers
    )
    assert created.status_code == 201
    listed = client.get("/api/v1/frontend/getProducts", headers=auth_headers)
    assert [p["id"] for p in listed.json()["products"]] == ["Widget"]


def test_unexpected_errors_are_redacted(database, auth_headers, monkeypatch):
    async def explode(organisation):
        raise RuntimeError("disk /var/lib/secret is full")

    monkeypatch.setattr(ProductCatalogService, "get_products", explode)
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/products", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
