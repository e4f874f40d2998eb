# grocery_app/core/errors.py
"""
Error taxonomy shared by services and routers.

Services raise these; `grocery_app.main` maps them onto HTTP responses so no
failure ever escapes as a 500 for a correctable situation.
"""


class GroceryError(Exception):
    """Base class for every error the app raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GroceryError):
    """Input rejected before any storage call (empty name, quantity <= 0, ...)."""


class NotFoundError(GroceryError):
    """Referenced catalog item, cart entry or checklist does not exist."""


class ChecklistConflictError(GroceryError):
    """A checklist is already active and overwrite was not confirmed."""


class StorageError(GroceryError):
    """Any persistence-layer failure. The session has been rolled back."""


class RemoteLookupError(GroceryError):
    """Barcode lookup failed (transport error or non-200 response)."""
