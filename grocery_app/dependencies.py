# grocery_app/dependencies.py
"""
Composition root for services.

Each getter builds its service once per process. Routers receive them with
Depends(...), and tests swap them out with app.dependency_overrides.
"""
from datetime import timedelta
from functools import lru_cache

from grocery_app.core.config import get_settings
from grocery_app.repositories.cart_repo import CartRepository
from grocery_app.repositories.catalog_repo import CatalogRepository
from grocery_app.services.cart_service import CartService
from grocery_app.services.catalog_service import CatalogService
from grocery_app.services.checklist_service import ChecklistService
from grocery_app.services.product_lookup import BarcodeService, ProductLookupClient
from grocery_app.services.reminder_service import ReminderScheduler

catalog_repo = CatalogRepository()
cart_repo = CartRepository()


@lru_cache
def get_catalog_service() -> CatalogService:
    return CatalogService(catalog_repo)


@lru_cache
def get_cart_service() -> CartService:
    return CartService(cart_repo, catalog_repo)


@lru_cache
def get_reminder_scheduler() -> ReminderScheduler:
    settings = get_settings()
    return ReminderScheduler(
        get_cart_service(),
        threshold=timedelta(days=settings.REMINDER_THRESHOLD_DAYS),
        latch_timeout=timedelta(seconds=settings.REMINDER_LATCH_TIMEOUT_SECONDS),
    )


@lru_cache
def get_checklist_service() -> ChecklistService:
    return ChecklistService(catalog_repo)


@lru_cache
def get_barcode_service() -> BarcodeService:
    settings = get_settings()
    client = ProductLookupClient(
        settings.PRODUCT_LOOKUP_URL,
        timeout=settings.PRODUCT_LOOKUP_TIMEOUT,
    )
    return BarcodeService(client)
