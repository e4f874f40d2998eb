# grocery_app/repositories/catalog_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from grocery_app.models.catalog import GroceryItem


class CatalogRepository:
    """
    Data access layer for the grocery catalog.

    - Pure DB operations (queries + category assignment).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, item_id: int) -> GroceryItem | None:
        return session.get(GroceryItem, item_id)

    def get_many(self, session: Session, item_ids: list[int]) -> list[GroceryItem]:
        if not item_ids:
            return []
        stmt = select(GroceryItem).where(GroceryItem.id.in_(item_ids))
        return session.exec(stmt).all()

    def list_all(self, session: Session) -> list[GroceryItem]:
        stmt = select(GroceryItem).order_by(GroceryItem.id)
        return session.exec(stmt).all()

    def search(self, session: Session, query: str) -> list[GroceryItem]:
        # SQLite lower() and LIKE both fold ASCII only, so non-ASCII names
        # still match case-sensitively
        escaped = (
            query.lower()
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        stmt = (
            select(GroceryItem)
            .where(func.lower(GroceryItem.name).like(f"%{escaped}%", escape="\\"))
            .order_by(GroceryItem.id)
        )
        return session.exec(stmt).all()

    def list_by_category(self, session: Session, category: str) -> list[GroceryItem]:
        stmt = (
            select(GroceryItem)
            .where(func.lower(GroceryItem.category) == category.lower())
            .order_by(GroceryItem.id)
        )
        return session.exec(stmt).all()

    def list_categories(self, session: Session) -> list[str]:
        stmt = (
            select(GroceryItem.category)
            .where(GroceryItem.category.is_not(None), GroceryItem.category != "")
            .distinct()
            .order_by(GroceryItem.category)
        )
        return list(session.exec(stmt).all())

    def update(self, session: Session, item: GroceryItem) -> GroceryItem:
        # Flush only; the service commits together with its other writes
        session.add(item)
        session.flush()
        session.refresh(item)
        return item
