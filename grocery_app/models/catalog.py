# grocery_app/models/catalog.py
from sqlmodel import SQLModel, Field


class GroceryItem(SQLModel, table=True):
    """
    Reference catalog entry.

    Seeded once when the table is first created (see
    `grocery_app.migrations.seed_catalog`). The app never deletes rows and
    never changes prices; the only mutation is category assignment.
    """

    __tablename__ = "grocery_items"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        min_length=1,
        index=True,
        description="Display name, also the search key",
    )

    price: float = Field(
        ge=0,
        description="Unit price in dollars",
    )

    category: str | None = Field(
        default=None,
        description="Lower-case category, null until a user assigns one",
    )
