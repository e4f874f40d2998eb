# grocery_app/repositories/cart_repo.py
from datetime import datetime, timedelta

from sqlalchemy import delete, func, or_, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from grocery_app.models.cart import PRIORITY_URGENT, CartEntry

cart_table = CartEntry.__table__


class CartRepository:
    """
    Data access layer for cart entries.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no validation; callers pass clean input.
    """

    # Get entries

    def list_all(self, session: Session) -> list[CartEntry]:
        stmt = select(CartEntry).order_by(CartEntry.id)
        return session.exec(stmt).all()

    def list_by_category(self, session: Session, category: str) -> list[CartEntry]:
        stmt = (
            select(CartEntry)
            .where(func.lower(CartEntry.category) == category.lower())
            .order_by(CartEntry.id)
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, entry_id: int) -> CartEntry | None:
        return session.get(CartEntry, entry_id)

    def get_by_name_key(self, session: Session, name_key: str) -> CartEntry | None:
        # The upsert bypasses the ORM, so refresh any copy already in the session
        stmt = (
            select(CartEntry)
            .where(CartEntry.name_key == name_key)
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    # Merge-on-add

    def upsert_increment(self, session: Session, entry: CartEntry) -> CartEntry:
        """
        Insert `entry`, or add its quantity to the row with the same name_key.

        Single INSERT ... ON CONFLICT statement, so two concurrent adds of
        the same name cannot both insert. On conflict only `quantity`
        changes; the existing row keeps every other column.

        Runs in the session transaction; the caller commits.
        """
        dialect = session.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert

        values = entry.model_dump(exclude={"id"})
        stmt = insert(cart_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[cart_table.c.name_key],
            set_={"quantity": cart_table.c.quantity + stmt.excluded.quantity},
        )
        session.connection().execute(stmt)
        return self.get_by_name_key(session, entry.name_key)

    # Updates

    def set_quantity(self, session: Session, entry_id: int, quantity: int) -> int:
        stmt = update(cart_table).where(cart_table.c.id == entry_id).values(quantity=quantity)
        result = session.connection().execute(stmt)
        session.commit()
        return result.rowcount

    def delete_by_id(self, session: Session, entry_id: int) -> int:
        stmt = delete(cart_table).where(cart_table.c.id == entry_id)
        result = session.connection().execute(stmt)
        session.commit()
        return result.rowcount

    def clear(self, session: Session) -> int:
        result = session.connection().execute(delete(cart_table))
        session.commit()
        return result.rowcount

    # Aggregates

    def total_price(self, session: Session) -> float:
        stmt = select(func.coalesce(func.sum(CartEntry.price * CartEntry.quantity), 0.0))
        return float(session.exec(stmt).one() or 0.0)

    def total_quantity(self, session: Session) -> int:
        stmt = select(func.coalesce(func.sum(CartEntry.quantity), 0))
        return int(session.exec(stmt).one() or 0)

    # Reminders

    def list_due_for_reminder(
        self,
        session: Session,
        threshold: timedelta,
        now: datetime,
    ) -> list[CartEntry]:
        """
        Urgent entries added at least `threshold` ago whose one-time
        reminder has not been shown yet. Ordered by id.
        """
        cutoff = now - threshold
        stmt = (
            select(CartEntry)
            .where(
                func.lower(CartEntry.priority) == PRIORITY_URGENT,
                CartEntry.added_at.is_not(None),
                CartEntry.added_at <= cutoff,
                or_(
                    CartEntry.urgent_reminder_shown.is_(None),
                    CartEntry.urgent_reminder_shown == False,  # noqa: E712
                ),
            )
            .order_by(CartEntry.id)
        )
        return session.exec(stmt).all()

    def mark_reminded(self, session: Session, entry_ids: list[int]) -> int:
        if not entry_ids:
            return 0
        stmt = (
            update(cart_table)
            .where(cart_table.c.id.in_(entry_ids))
            .values(urgent_reminder_shown=True)
        )
        result = session.connection().execute(stmt)
        session.commit()
        return result.rowcount

    # Due dates

    def list_due_between(
        self,
        session: Session,
        start: datetime,
        end: datetime,
    ) -> list[CartEntry]:
        stmt = (
            select(CartEntry)
            .where(
                CartEntry.due_date.is_not(None),
                CartEntry.due_date > start,
                CartEntry.due_date < end,
            )
            .order_by(CartEntry.due_date, CartEntry.id)
        )
        return session.exec(stmt).all()
