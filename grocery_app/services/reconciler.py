# grocery_app/services/reconciler.py
"""
Checklist vs. cart comparison.

Pure functions: no storage, no side effects. A checklist item counts as
"in the cart" when some cart entry has the same name, ignoring case.
Price, category and ids play no part in the match.
"""
from typing import Iterable

from grocery_app.schemas.checklist import SimpleChecklist


def _cart_names(cart_entries: Iterable) -> set[str]:
    return {entry.name.lower() for entry in cart_entries}


def is_in_cart(item, cart_names: set[str]) -> bool:
    return item.name.lower() in cart_names


def progress(checklist: SimpleChecklist, cart_entries: Iterable) -> float:
    """
    Fraction of checklist items present in the cart, in [0, 1].

    An empty checklist is 0.0, never "complete".
    """
    if not checklist.items:
        return 0.0
    names = _cart_names(cart_entries)
    found = sum(1 for item in checklist.items if is_in_cart(item, names))
    return found / len(checklist.items)


def missing_items(checklist: SimpleChecklist, cart_entries: Iterable) -> list:
    """
    Checklist items with no matching cart entry, in checklist order.
    """
    names = _cart_names(cart_entries)
    return [item for item in checklist.items if not is_in_cart(item, names)]
