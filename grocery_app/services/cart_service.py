# grocery_app/services/cart_service.py
import logging
from datetime import datetime, timedelta

from sqlmodel import Session

from grocery_app.core.errors import ValidationError
from grocery_app.database import storage_guard
from grocery_app.models.cart import PRIORITY_REGULAR, CartEntry, name_key_for
from grocery_app.models.types import utc_now
from grocery_app.repositories.cart_repo import CartRepository
from grocery_app.repositories.catalog_repo import CatalogRepository
from grocery_app.schemas.cart import (
    CartEntryCreate,
    CartEntryRead,
    CartSummary,
    DueSoonSummary,
)

logger = logging.getLogger(__name__)


def to_read(entry: CartEntry) -> CartEntryRead:
    return CartEntryRead(
        id=entry.id,
        name=entry.name,
        upc=entry.upc,
        price=entry.price,
        category=entry.category,
        priority=entry.priority,
        quantity=entry.quantity,
        description=entry.description,
        added_at=entry.added_at,
        urgent_reminder_shown=entry.urgent_reminder_shown,
        due_date=entry.due_date,
        line_total=entry.line_total,
    )


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - reject empty names / non-positive quantities before touching storage
      - merge repeat adds of the same name (case-insensitive) into one row
      - quantity updates, where <= 0 means remove
      - totals, urgent reminders and due-soon estimates
    """

    def __init__(self, cart_repo: CartRepository, catalog_repo: CatalogRepository):
        self.cart_repo = cart_repo
        self.catalog_repo = catalog_repo

    # ---- reads ----

    def list_entries(self, session: Session, category: str | None = None) -> list[CartEntry]:
        """
        All entries, or only those whose category matches (any case).

        An empty filter means no filter; entries without a category never
        match a non-empty filter.
        """
        category = (category or "").strip()
        with storage_guard(session, "load your cart"):
            if not category:
                return self.cart_repo.list_all(session)
            return self.cart_repo.list_by_category(session, category)

    def total(self, session: Session) -> float:
        with storage_guard(session, "total your cart"):
            return self.cart_repo.total_price(session)

    def item_count(self, session: Session) -> int:
        with storage_guard(session, "count your cart"):
            return self.cart_repo.total_quantity(session)

    def get_cart_summary(self, session: Session, category: str | None = None) -> CartSummary:
        """
        Return full cart summary:
          - list of CartEntryRead (with line_total), filtered by category
          - total_quantity and total_price over the whole cart
        """
        entries = self.list_entries(session, category)
        return CartSummary(
            items=[to_read(e) for e in entries],
            total_quantity=self.item_count(session),
            total_price=self.total(session),
        )

    # ---- writes ----

    def _new_entry(
        self,
        name: str,
        price: float,
        quantity: int,
        *,
        category: str | None,
        priority: str | None,
        description: str | None,
        upc: str | None,
        due_date: datetime | None,
    ) -> CartEntry:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter a product name")
        if quantity is None or quantity <= 0:
            raise ValidationError("Please select a quantity greater than 0")
        if price is None or price < 0:
            raise ValidationError("Price cannot be negative")

        return CartEntry(
            name=name,
            name_key=name_key_for(name),
            price=price,
            quantity=quantity,
            category=category.lower() if category else None,
            priority=priority.lower() if priority else PRIORITY_REGULAR,
            description=description,
            upc=upc,
            added_at=utc_now(),
            urgent_reminder_shown=False,
            due_date=due_date,
        )

    def add_or_merge(
        self,
        session: Session,
        name: str,
        price: float = 0.0,
        quantity: int = 1,
        *,
        category: str | None = None,
        priority: str | None = None,
        description: str | None = None,
        upc: str | None = None,
        due_date: datetime | None = None,
    ) -> CartEntry:
        """
        Add `quantity` of `name` to the cart.

        If an entry with the same name (compared case-insensitively)
        exists, only its quantity grows. The price, category, priority,
        description, upc and due date passed here are discarded for it.
        """
        entry = self._new_entry(
            name,
            price,
            quantity,
            category=category,
            priority=priority,
            description=description,
            upc=upc,
            due_date=due_date,
        )

        with storage_guard(session, "add the item to your cart"):
            saved = self.cart_repo.upsert_increment(session, entry)
            session.commit()
        return saved

    def add_to_cart(self, session: Session, payload: CartEntryCreate) -> CartEntry:
        """
        Add from a client payload.

        If the payload points at a catalog item that has no category yet,
        the chosen category is saved on the catalog item too. Both writes
        commit together; an unknown catalog item is rejected before either.
        """
        entry = self._new_entry(
            payload.name,
            payload.price,
            payload.quantity,
            category=payload.category,
            priority=payload.priority,
            description=payload.description,
            upc=payload.upc,
            due_date=payload.due_date,
        )

        with storage_guard(session, "add the item to your cart"):
            item = None
            if payload.catalog_item_id is not None:
                item = self.catalog_repo.get_by_id(session, payload.catalog_item_id)
                if item is None:
                    raise ValidationError("Catalog item not found")

            saved = self.cart_repo.upsert_increment(session, entry)

            if item is not None and item.category is None and entry.category:
                item.category = entry.category
                self.catalog_repo.update(session, item)

            session.commit()
        return saved

    def update_quantity(self, session: Session, entry_id: int, quantity: int) -> int:
        """
        Set the quantity; 0 or less removes the entry.

        Returns the number of rows touched (0 when the id is unknown).
        """
        if quantity <= 0:
            return self.remove(session, entry_id)
        with storage_guard(session, "update the quantity"):
            return self.cart_repo.set_quantity(session, entry_id, quantity)

    def remove(self, session: Session, entry_id: int) -> int:
        with storage_guard(session, "remove the item"):
            return self.cart_repo.delete_by_id(session, entry_id)

    def clear(self, session: Session) -> int:
        with storage_guard(session, "clear your cart"):
            removed = self.cart_repo.clear(session)
        logger.info("Cleared cart (%s entries)", removed)
        return removed

    # ---- reminders ----

    def find_due_for_reminder(
        self,
        session: Session,
        threshold: timedelta,
        now: datetime | None = None,
    ) -> list[CartEntry]:
        with storage_guard(session, "check reminders"):
            return self.cart_repo.list_due_for_reminder(session, threshold, now or utc_now())

    def mark_reminded(self, session: Session, entry_ids: list[int]) -> int:
        if not entry_ids:
            return 0
        with storage_guard(session, "save the reminder"):
            return self.cart_repo.mark_reminded(session, list(entry_ids))

    # ---- due dates ----

    def due_within(
        self,
        session: Session,
        days: int,
        now: datetime | None = None,
    ) -> DueSoonSummary:
        """
        Entries due strictly between now and now + days, with their cost.
        """
        if days <= 0:
            raise ValidationError("days must be at least 1")
        now = now or utc_now()
        with storage_guard(session, "load due items"):
            entries = self.cart_repo.list_due_between(session, now, now + timedelta(days=days))

        return DueSoonSummary(
            days=days,
            items=[to_read(e) for e in entries],
            count=len(entries),
            total_price=sum(e.line_total for e in entries),
        )
