# grocery_app/routers/barcode.py
from fastapi import APIRouter, Depends

from grocery_app.dependencies import get_barcode_service
from grocery_app.schemas.barcode import BarcodeLookupRead
from grocery_app.services.product_lookup import BarcodeService

router = APIRouter(prefix="/barcode", tags=["Barcode"])


@router.get("/{upc}", response_model=BarcodeLookupRead)
def lookup_barcode(
    upc: str,
    service: BarcodeService = Depends(get_barcode_service),
):
    """
    Look up a scanned barcode.

    Always 200: when the product is unknown or the lookup fails,
    `found` is false and name/description are empty.
    """
    return service.lookup(upc)
