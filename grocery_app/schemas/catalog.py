# grocery_app/schemas/catalog.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class GroceryItemRead(SQLModel):
    """
    Catalog item representation for clients.
    """

    id: int
    name: str
    price: float
    category: str | None = None


class CategoryAssign(SQLModel):
    """
    Payload for assigning a category to a catalog item.

    Stored lower-cased.
    """

    model_config = ConfigDict(extra="forbid")

    category: str = Field(max_length=50)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("category cannot be empty")
        return v
