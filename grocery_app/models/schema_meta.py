# grocery_app/models/schema_meta.py
from sqlmodel import SQLModel, Field


class SchemaMeta(SQLModel, table=True):
    """
    Single-row table recording which cart-schema migration ran last.
    """

    __tablename__ = "schema_meta"

    id: int = Field(default=1, primary_key=True)
    version: int = Field(ge=1)
