# grocery_app/models/cart.py
from datetime import datetime

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from grocery_app.models.types import EpochMillis, utc_now


PRIORITY_URGENT = "urgent"
PRIORITY_REGULAR = "regular"


def name_key_for(name: str) -> str:
    """
    Canonical merge key for a cart entry name.

    Names are folded to lower case at the storage boundary so that
    "Milk" and "milk" land on the same row, matching how checklists
    compare names.
    """
    return name.strip().lower()


class CartEntry(SQLModel, table=True):
    """
    One line of the shopping cart.

    At most one row per `name_key`: adding an existing name bumps
    `quantity` and leaves every other column as it was.
    """

    __tablename__ = "cart_items"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        min_length=1,
        description="Display name as given on the first add",
    )

    name_key: str = Field(
        unique=True,
        index=True,
        description="name.strip().lower(); merge-on-add key",
    )

    upc: str | None = Field(
        default=None,
        description="Barcode, when the entry came from a scan",
    )

    price: float = Field(
        ge=0,
        description="Price per unit when added (informational)",
    )

    category: str | None = Field(
        default=None,
        description="Lower-case user-chosen category",
    )

    priority: str | None = Field(
        default=PRIORITY_REGULAR,
        description="'urgent' or 'regular'",
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    description: str | None = None

    added_at: datetime | None = Field(
        default_factory=utc_now,
        sa_column=Column(EpochMillis(), nullable=True),
    )

    urgent_reminder_shown: bool | None = Field(
        default=False,
        description="Set once the one-time urgent reminder was presented",
    )

    due_date: datetime | None = Field(
        default=None,
        sa_column=Column(EpochMillis(), nullable=True),
    )

    @property
    def line_total(self) -> float:
        return self.price * self.quantity
