import asyncio

import pytest
from fastapi.testclient import TestClient

from cashier_api.app.core.config import settings
from cashier_api.app.core.db import init_db
from cashier_api.app.core.security import create_access_token
from cashier_api.app.main import app
from cashier_api.app.services.organisation_service import OrganisationService


CASHIER_EMAIL = "cashier@acme.test"
CASHIER_PASSWORD = "s3cret-pass"


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "cashier-test.db"))
    init_db()
    return settings.database_url


@pytest.fixture
def organisation(database):
    return asyncio.run(OrganisationService.create_organisation("Acme"))


@pytest.fixture
def other_organisation(database):
    return asyncio.run(OrganisationService.create_organisation("Globex"))


@pytest.fixture
def auth_headers(organisation):
    asyncio.run(OrganisationService.create_user(CASHIER_EMAIL, CASHIER_PASSWORD, organisation.id))
    token = create_access_token({"sub": CASHIER_EMAIL})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(database):
    with TestClient(app) as test_client:
        yield test_client
