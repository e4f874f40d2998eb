"""
Shared fixtures: a fresh in-memory database per test, built with the same
init_db() the app runs at startup, plus services and an API client wired
to it.
"""
from datetime import timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from grocery_app.database import build_engine, get_session
from grocery_app.dependencies import (
    get_barcode_service,
    get_cart_service,
    get_catalog_service,
    get_checklist_service,
    get_reminder_scheduler,
)
from grocery_app.main import app
from grocery_app.migrations import init_db
from grocery_app.repositories.cart_repo import CartRepository
from grocery_app.repositories.catalog_repo import CatalogRepository
from grocery_app.services.cart_service import CartService
from grocery_app.services.catalog_service import CatalogService
from grocery_app.services.checklist_service import ChecklistService
from grocery_app.services.product_lookup import BarcodeService, ProductLookupClient
from grocery_app.services.reminder_service import ReminderScheduler

LOOKUP_URL = "https://off.test/api/v0/product"

OFF_PRODUCTS = {
    "5449000000996": {
        "status": 1,
        "product": {
            "product_name": "Coca-Cola 1L",
            "generic_name": "Refreshing beverage with original taste",
            "brands": "Coca-Cola",
            "quantity": "1 L",
        },
    },
}


def off_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for Open Food Facts: known codes, unknown codes, and a 500."""
    upc = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
    if upc == "500":
        return httpx.Response(500, text="boom")
    if upc in OFF_PRODUCTS:
        return httpx.Response(200, json=OFF_PRODUCTS[upc])
    return httpx.Response(200, json={"status": 0, "status_verbose": "product not found"})


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def catalog_service():
    return CatalogService(CatalogRepository())


@pytest.fixture
def cart_service():
    return CartService(CartRepository(), CatalogRepository())


@pytest.fixture
def scheduler(cart_service):
    return ReminderScheduler(cart_service, threshold=timedelta(days=7))


@pytest.fixture
def checklist_service():
    return ChecklistService(CatalogRepository())


@pytest.fixture
def lookup_client():
    return ProductLookupClient(LOOKUP_URL, transport=httpx.MockTransport(off_handler))


@pytest.fixture
def barcode_service(lookup_client):
    return BarcodeService(lookup_client)


@pytest.fixture
def client(
    engine,
    catalog_service,
    cart_service,
    scheduler,
    checklist_service,
    barcode_service,
):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    app.dependency_overrides[get_cart_service] = lambda: cart_service
    app.dependency_overrides[get_reminder_scheduler] = lambda: scheduler
    app.dependency_overrides[get_checklist_service] = lambda: checklist_service
    app.dependency_overrides[get_barcode_service] = lambda: barcode_service

    # Not used as a context manager: the lifespan would open the real DB file
    yield TestClient(app)

    app.dependency_overrides.clear()
