# grocery_app/services/product_lookup.py
import logging

import httpx

from grocery_app.core.errors import RemoteLookupError, ValidationError
from grocery_app.schemas.barcode import BarcodeLookupRead, ProductInfo

logger = logging.getLogger(__name__)


class ProductLookupClient:
    """
    Read-only barcode lookup against Open Food Facts.

    GET {base_url}/{upc}.json
      - 200 + status == 1 -> ProductInfo
      - 200 + status != 1 -> None (unknown product)
      - anything else     -> RemoteLookupError

    No retry. `timeout=None` waits as long as the server takes.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def lookup(self, upc: str) -> ProductInfo | None:
        url = f"{self.base_url}/{upc}.json"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise RemoteLookupError(f"Lookup for {upc} failed: {exc}") from exc

        if response.status_code != 200:
            raise RemoteLookupError(
                f"Lookup for {upc} returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteLookupError(f"Lookup for {upc} returned invalid JSON") from exc

        if data.get("status") != 1:
            return None

        product = data.get("product") or {}
        name = product.get("product_name") or product.get("generic_name") or ""
        if not name:
            return None
        return ProductInfo(name=name, description=self._describe(product, name))

    @staticmethod
    def _describe(product: dict, name: str) -> str:
        """
        Short one-line description:
          - generic_name when it adds something beyond the name
          - otherwise "brands, quantity"
        """
        generic = (product.get("generic_name") or "").strip()
        if generic and generic.lower() != name.lower():
            return generic
        parts = [product.get("brands"), product.get("quantity")]
        return ", ".join(p.strip() for p in parts if p and p.strip())


class BarcodeService:
    """
    Barcode flow: look the product up, never fail the request.

    A failed lookup is logged and the fields stay empty so the user can
    type them in.
    """

    def __init__(self, client: ProductLookupClient):
        self.client = client

    def lookup(self, upc: str) -> BarcodeLookupRead:
        upc = (upc or "").strip()
        if not upc:
            raise ValidationError("Barcode cannot be empty")

        try:
            info = self.client.lookup(upc)
        except RemoteLookupError as exc:
            logger.warning("Barcode lookup failed: %s", exc)
            return BarcodeLookupRead(upc=upc, found=False)

        if info is None:
            logger.info("Barcode %s not found", upc)
            return BarcodeLookupRead(upc=upc, found=False)

        return BarcodeLookupRead(
            upc=upc,
            found=True,
            name=info.name,
            description=info.description,
        )
