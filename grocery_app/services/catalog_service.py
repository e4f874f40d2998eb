# grocery_app/services/catalog_service.py
from sqlmodel import Session

from grocery_app.core.errors import NotFoundError, ValidationError
from grocery_app.database import storage_guard
from grocery_app.models.catalog import GroceryItem
from grocery_app.repositories.catalog_repo import CatalogRepository


class CatalogService:
    """
    Business logic for the grocery catalog.

    Responsibilities:
      - search by name (empty query = whole catalog)
      - filter by category (unknown category = nothing, not everything)
      - category assignment, always stored lower-cased
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def search_items(self, session: Session, query: str = "") -> list[GroceryItem]:
        query = (query or "").strip()
        with storage_guard(session, "search the catalog"):
            if not query:
                return self.repo.list_all(session)
            return self.repo.search(session, query)

    def get_items_by_category(self, session: Session, category: str) -> list[GroceryItem]:
        category = (category or "").strip()
        if not category:
            return []
        with storage_guard(session, "load the category"):
            return self.repo.list_by_category(session, category)

    def list_categories(self, session: Session) -> list[str]:
        with storage_guard(session, "load categories"):
            return self.repo.list_categories(session)

    def get_item(self, session: Session, item_id: int) -> GroceryItem:
        with storage_guard(session, "load the item"):
            item = self.repo.get_by_id(session, item_id)
        if not item:
            raise NotFoundError("Catalog item not found")
        return item

    def assign_category(self, session: Session, item_id: int, category: str) -> bool:
        """
        Overwrite the item's category (lower-cased).

        Returns False, without writing, when the id does not exist.
        """
        category = (category or "").strip().lower()
        if not category:
            raise ValidationError("Category cannot be empty")

        with storage_guard(session, "save the category"):
            item = self.repo.get_by_id(session, item_id)
            if not item:
                return False
            item.category = category
            self.repo.update(session, item)
            session.commit()
        return True
