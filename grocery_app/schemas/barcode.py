# grocery_app/schemas/barcode.py
from sqlmodel import SQLModel


class ProductInfo(SQLModel):
    """
    What a barcode lookup tells us about a product.
    """

    name: str
    description: str


class BarcodeLookupRead(SQLModel):
    """
    Barcode lookup result for clients.

    When the product is unknown or the lookup failed, name and
    description stay empty so the user can fill them in by hand.
    """

    upc: str
    found: bool
    name: str = ""
    description: str = ""
