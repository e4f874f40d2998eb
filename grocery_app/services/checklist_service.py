# grocery_app/services/checklist_service.py
import logging
import threading

from sqlmodel import Session

from grocery_app.core.errors import (
    ChecklistConflictError,
    NotFoundError,
    ValidationError,
)
from grocery_app.database import storage_guard
from grocery_app.models.cart import CartEntry
from grocery_app.repositories.catalog_repo import CatalogRepository
from grocery_app.schemas.catalog import GroceryItemRead
from grocery_app.schemas.checklist import (
    ChecklistItemStatus,
    ChecklistStatus,
    SimpleChecklist,
)
from grocery_app.services import reconciler

logger = logging.getLogger(__name__)


class ChecklistService:
    """
    Holds the one active checklist for this process.

    Checklists are not persisted. Creating a new one replaces the old one
    wholesale, and only when the caller confirms with overwrite=True.
    """

    def __init__(self, catalog_repo: CatalogRepository):
        self.catalog_repo = catalog_repo
        self._active: SimpleChecklist | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> SimpleChecklist | None:
        return self._active

    def create(
        self,
        session: Session,
        name: str,
        item_ids: list[int],
        overwrite: bool = False,
    ) -> SimpleChecklist:
        """
        Build a checklist from catalog ids and make it the active one.

        Raises:
            ValidationError: empty name, no items, or unknown catalog ids.
            ChecklistConflictError: a checklist exists and overwrite is False.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter a checklist name")
        if not item_ids:
            raise ValidationError("Please add at least one item")

        # Keep the first occurrence of each id, in the order given
        unique_ids = list(dict.fromkeys(item_ids))

        with storage_guard(session, "load checklist items"):
            found = {item.id: item for item in self.catalog_repo.get_many(session, unique_ids)}

        unknown = [i for i in unique_ids if i not in found]
        if unknown:
            raise ValidationError(f"Unknown catalog items: {unknown}")

        checklist = SimpleChecklist(
            name=name,
            items=[GroceryItemRead.model_validate(found[i], from_attributes=True) for i in unique_ids],
        )

        with self._lock:
            if self._active is not None and not overwrite:
                raise ChecklistConflictError(
                    "Creating a new checklist will overwrite the current one. "
                    "Confirm with overwrite=true."
                )
            self._active = checklist

        logger.info("Active checklist is now %r (%s items)", name, len(checklist.items))
        return checklist

    def get(self) -> SimpleChecklist:
        if self._active is None:
            raise NotFoundError("No checklist yet")
        return self._active

    def status(self, cart_entries: list[CartEntry]) -> ChecklistStatus:
        """
        Progress of the active checklist against a cart snapshot.
        """
        checklist = self.get()
        names = {entry.name.lower() for entry in cart_entries}
        progress = reconciler.progress(checklist, cart_entries)

        items = [
            ChecklistItemStatus(**item.model_dump(), in_cart=reconciler.is_in_cart(item, names))
            for item in checklist.items
        ]

        return ChecklistStatus(
            name=checklist.name,
            items=items,
            progress=progress,
            percentage=round(progress * 100),
            completed=sum(1 for i in items if i.in_cart),
            total=len(items),
            missing=reconciler.missing_items(checklist, cart_entries),
        )
