# grocery_app/migrations.py
"""
Schema bootstrap for the embedded database.

- `grocery_items` is created and seeded exactly once. Upgrades never
  touch its rows.
- `cart_items` evolves through the ordered MIGRATIONS list. Each step is
  forward-only and checks the live schema before altering it, so running
  a step twice (or against a table that already has the column) is safe.
- `schema_meta.version` records the last step applied. A database that
  has `cart_items` but no `schema_meta` row is a pre-versioning install
  and starts from version 1.
"""
import logging
from typing import Callable

from sqlalchemy import inspect, insert, text
from sqlalchemy.engine import Connection, Engine
from sqlmodel import SQLModel

# Import models so SQLModel metadata is populated before create_all()
from grocery_app.models.cart import CartEntry, name_key_for
from grocery_app.models.catalog import GroceryItem
from grocery_app.models.schema_meta import SchemaMeta
from grocery_app.models.types import utc_now

logger = logging.getLogger(__name__)

CART_TABLE = CartEntry.__tablename__
NAME_KEY_INDEX = "ix_cart_items_name_key"


# Reference list, grouped meats / produce / beverages / misc.
# Categories start empty; users assign them.
CATALOG_SEED: list[tuple[str, float]] = [
    # Meats
    ("Ground Beef (per LB)", 5.99),
    ("Chicken Breast", 4.99),
    ("Pork Chops", 6.49),
    ("Salmon Fillet", 12.99),
    ("Sliced Turkey (per LB)", 3.99),
    ("Bacon", 7.99),
    ("Italian Sausage", 5.49),
    ("Ribeye Steak (per LB)", 15.99),
    # Produce
    ("Bananas (per LB)", 1.29),
    ("Apples (per LB)", 3.99),
    ("Carrots", 1.99),
    ("Broccoli", 2.49),
    ("Spinach", 2.99),
    ("Tomatoes (per LB)", 2.79),
    ("Potatoes", 4.99),
    ("Onions", 2.49),
    ("Bell Peppers", 3.49),
    ("Lettuce", 1.99),
    ("Avocados", 4.99),
    ("Strawberries (per LB)", 3.99),
    # Beverages
    ("Coca-Cola", 5.99),
    ("Pepsi", 5.99),
    ("Orange Juice", 3.49),
    ("Milk", 3.99),
    ("Coffee", 8.99),
    ("Bottled Water", 4.99),
    ("Energy Drink", 7.99),
    ("Apple Juice", 2.99),
    ("Beer", 8.99),
    ("Wine", 12.99),
    # Misc
    ("Bread", 2.49),
    ("Eggs", 2.99),
    ("Butter", 4.49),
    ("Cheese", 3.99),
    ("Yogurt", 4.99),
    ("Rice", 3.49),
    ("Pasta", 1.99),
    ("Cereal", 4.99),
    ("Peanut Butter", 3.99),
    ("Olive Oil", 6.99),
    ("Salt", 1.49),
    ("Sugar", 3.49),
    ("Flour", 2.99),
    ("Canned Tomatoes", 1.29),
    ("Chicken Broth", 1.99),
    ("Frozen Pizza", 4.99),
    ("Ice Cream", 5.99),
    ("Frozen Vegetables", 2.49),
    ("Toilet Paper", 8.99),
    ("Paper Towels", 7.99),
    ("Dish Soap", 2.99),
    ("Laundry Detergent", 9.99),
]


# ----- Helpers -----


def _columns(conn: Connection, table: str) -> set[str]:
    return {col["name"] for col in inspect(conn).get_columns(table)}


def _add_column(conn: Connection, name: str, ddl: str) -> bool:
    """
    ALTER TABLE cart_items ADD COLUMN, unless the column is already there.
    """
    if name in _columns(conn, CART_TABLE):
        return False
    conn.execute(text(f"ALTER TABLE {CART_TABLE} ADD COLUMN {name} {ddl}"))
    return True


def _now_millis() -> int:
    return int(utc_now().timestamp() * 1000)


# ----- Migration steps (cart_items) -----


def _add_upc(conn: Connection) -> None:
    _add_column(conn, "upc", "TEXT")


def _add_added_at(conn: Connection) -> None:
    _add_column(conn, "added_at", "INTEGER")
    # Existing rows get "now" so they start their reminder clock today
    conn.execute(
        text(f"UPDATE {CART_TABLE} SET added_at = :now WHERE added_at IS NULL"),
        {"now": _now_millis()},
    )


def _add_reminder_flag(conn: Connection) -> None:
    _add_column(conn, "urgent_reminder_shown", "INTEGER DEFAULT 0")


def _add_due_date(conn: Connection) -> None:
    _add_column(conn, "due_date", "INTEGER")


def _add_name_key(conn: Connection) -> None:
    """
    Add the canonical merge key and make it unique.

    Older installs matched names case-sensitively, so "Milk" and "milk"
    could both exist. Those rows are folded into the oldest one (lowest
    id) with the quantities summed before the unique index goes on.
    """
    _add_column(conn, "name_key", "TEXT")

    rows = conn.execute(
        text(f"SELECT id, name, name_key, quantity FROM {CART_TABLE} ORDER BY id")
    ).all()

    survivors: dict[str, tuple[int, int]] = {}
    for row_id, name, key, quantity in rows:
        canonical = name_key_for(name or "")
        if key != canonical:
            conn.execute(
                text(f"UPDATE {CART_TABLE} SET name_key = :key WHERE id = :id"),
                {"key": canonical, "id": row_id},
            )

        if canonical not in survivors:
            survivors[canonical] = (row_id, quantity or 0)
            continue

        keep_id, kept_qty = survivors[canonical]
        merged = kept_qty + (quantity or 0)
        survivors[canonical] = (keep_id, merged)
        conn.execute(
            text(f"UPDATE {CART_TABLE} SET quantity = :qty WHERE id = :id"),
            {"qty": merged, "id": keep_id},
        )
        conn.execute(text(f"DELETE FROM {CART_TABLE} WHERE id = :id"), {"id": row_id})
        logger.info("Folded duplicate cart row %s into %s (%r)", row_id, keep_id, canonical)

    existing = {ix["name"] for ix in inspect(conn).get_indexes(CART_TABLE)}
    if NAME_KEY_INDEX not in existing:
        conn.execute(
            text(f"CREATE UNIQUE INDEX {NAME_KEY_INDEX} ON {CART_TABLE} (name_key)")
        )


MIGRATIONS: list[tuple[int, Callable[[Connection], None]]] = [
    (2, _add_upc),
    (3, _add_added_at),
    (4, _add_reminder_flag),
    (5, _add_due_date),
    (6, _add_name_key),
]

LATEST_VERSION = MIGRATIONS[-1][0]


# ----- Version bookkeeping -----


def get_schema_version(conn: Connection) -> int | None:
    row = conn.execute(
        text("SELECT version FROM schema_meta WHERE id = 1")
    ).first()
    return row[0] if row else None


def _set_schema_version(conn: Connection, version: int) -> None:
    updated = conn.execute(
        text("UPDATE schema_meta SET version = :v WHERE id = 1"), {"v": version}
    )
    if updated.rowcount == 0:
        conn.execute(insert(SchemaMeta.__table__).values(id=1, version=version))


def run_migrations(engine: Engine, from_version: int) -> int:
    """
    Apply every step newer than `from_version`, one transaction per step.

    Returns the version the schema ends at.
    """
    version = from_version
    for target, step in MIGRATIONS:
        if target <= version:
            continue
        logger.info("Migrating %s to schema version %s (%s)", CART_TABLE, target, step.__name__)
        with engine.begin() as conn:
            step(conn)
            _set_schema_version(conn, target)
        version = target
    return version


# ----- Catalog seed -----


def seed_catalog(conn: Connection) -> int:
    conn.execute(
        insert(GroceryItem.__table__),
        [{"name": name, "price": price} for name, price in CATALOG_SEED],
    )
    return len(CATALOG_SEED)


# ----- Entry point -----


def init_db(engine: Engine) -> None:
    """
    Create missing tables, migrate `cart_items`, seed `grocery_items`.
    """
    inspector = inspect(engine)
    had_cart = inspector.has_table(CART_TABLE)
    had_catalog = inspector.has_table(GroceryItem.__tablename__)

    SQLModel.metadata.create_all(engine)

    with engine.begin() as conn:
        version = get_schema_version(conn)
        if version is None:
            version = 1 if had_cart else LATEST_VERSION
            _set_schema_version(conn, version)

        if not had_catalog:
            count = seed_catalog(conn)
            logger.info("Seeded %s catalog items", count)

    if version < LATEST_VERSION:
        run_migrations(engine, version)
