# grocery_app/schemas/checklist.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from grocery_app.schemas.catalog import GroceryItemRead


class ChecklistCreate(SQLModel):
    """
    Payload for creating (or replacing) the active checklist.

    - item_ids refer to catalog items; repeats are dropped
    - overwrite must be true to replace an existing checklist
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    item_ids: list[int]
    overwrite: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a checklist name")
        return v

    @field_validator("item_ids")
    @classmethod
    def validate_items(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("Please add at least one item")
        return v


class SimpleChecklist(SQLModel):
    """
    A named list of catalog items tracked for re-purchase.

    Items are snapshots of catalog rows; only their names matter when
    comparing against the cart.
    """

    name: str
    items: list[GroceryItemRead]


class ChecklistItemStatus(GroceryItemRead):
    in_cart: bool


class ChecklistStatus(SQLModel):
    """
    Active checklist with its progress against the current cart.
    """

    name: str
    items: list[ChecklistItemStatus]
    progress: float
    percentage: int
    completed: int
    total: int
    missing: list[GroceryItemRead]
