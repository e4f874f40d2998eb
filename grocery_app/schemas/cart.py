# grocery_app/schemas/cart.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


Priority = Literal["urgent", "regular"]


class CartEntryCreate(SQLModel):
    """
    Payload for adding to cart.

    - name and quantity are required; everything else is optional
    - an existing entry with the same name (any case) only gets its
      quantity increased; the other fields here are ignored for it
    - catalog_item_id: when the catalog item has no category yet, the
      chosen category is saved on it for future searches
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    price: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=1, gt=0)
    category: str | None = Field(default=None, max_length=50)
    priority: Priority | None = None
    description: str | None = None
    upc: str | None = Field(default=None, max_length=64)
    due_date: datetime | None = None
    catalog_item_id: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("category", "description", "upc")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class CartEntryUpdate(SQLModel):
    """
    Payload for updating the quantity of a cart entry.

    quantity <= 0 removes the entry.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartEntryRead(SQLModel):
    """
    Read model for a single cart entry, including line_total.
    """

    id: int
    name: str
    upc: str | None = None
    price: float
    category: str | None = None
    priority: str | None = None
    quantity: int
    description: str | None = None
    added_at: datetime | None = None
    urgent_reminder_shown: bool = False
    due_date: datetime | None = None
    line_total: float

    @field_validator("urgent_reminder_shown", mode="before")
    @classmethod
    def null_flag_is_false(cls, v):
        # Rows from before the reminder column existed may hold NULL
        return bool(v)


class ReminderBatch(SQLModel):
    """
    One batched prompt covering every urgent entry that is due.
    """

    ids: list[int]
    items: list[CartEntryRead]
    message: str


class ReminderAck(SQLModel):
    """
    Ids of the entries that were actually shown to the user.
    """

    model_config = ConfigDict(extra="forbid")

    ids: list[int]


class CartSummary(SQLModel):
    """
    Full cart response model with totals.

    `reminder` is set only on the load that starts presenting a batch.
    """

    items: list[CartEntryRead]
    total_quantity: int
    total_price: float
    reminder: ReminderBatch | None = None


class DueSoonSummary(SQLModel):
    """
    Entries due within the next `days` days and what they cost.
    """

    days: int
    items: list[CartEntryRead]
    count: int
    total_price: float


class RemovedCount(SQLModel):
    removed: int
