# grocery_app/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from grocery_app.core.config import get_settings
from grocery_app.database import get_session
from grocery_app.dependencies import get_cart_service, get_reminder_scheduler
from grocery_app.schemas.cart import (
    CartEntryCreate,
    CartEntryRead,
    CartEntryUpdate,
    CartSummary,
    DueSoonSummary,
    RemovedCount,
    ReminderAck,
)
from grocery_app.services.cart_service import CartService, to_read
from grocery_app.services.reminder_service import ReminderScheduler

router = APIRouter(prefix="/cart", tags=["Cart"])

settings = get_settings()


@router.get("", response_model=CartSummary)
def get_cart(
    category: str | None = None,
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """
    Get the cart, optionally filtered by category.

    Every load also checks for urgent reminders. When a batch starts,
    it is returned in `reminder`; acknowledge it via POST /cart/reminders/ack.
    """
    summary = service.get_cart_summary(session, category)
    summary.reminder = scheduler.poll(session)
    return summary


@router.post("", response_model=CartEntryRead)
def add_to_cart(
    payload: CartEntryCreate,
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
):
    """
    Add an item to the cart.

    Adding a name that is already in the cart (any case) only increases
    its quantity. Returns the resulting entry.
    """
    return to_read(service.add_to_cart(session, payload))


@router.patch("/{entry_id}", response_model=CartSummary)
def update_cart_entry(
    entry_id: int,
    payload: CartEntryUpdate,
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
):
    """
    Update the quantity of a cart entry. Quantity <= 0 removes it.

    Returns the updated cart summary.
    """
    if not service.update_quantity(session, entry_id, payload.quantity):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not in cart",
        )
    return service.get_cart_summary(session)


@router.delete("/{entry_id}", response_model=CartSummary)
def remove_cart_entry(
    entry_id: int,
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
):
    """
    Remove an entry from the cart.

    Returns the updated cart summary.
    """
    if not service.remove(session, entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found in cart",
        )
    return service.get_cart_summary(session)


@router.delete("", response_model=RemovedCount)
def clear_cart(
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
):
    """
    Clear the entire cart.
    """
    return RemovedCount(removed=service.clear(session))


@router.get("/due-soon", response_model=DueSoonSummary)
def get_due_soon(
    days: int = Query(default=settings.DUE_SOON_DAYS, ge=1, le=365),
    session: Session = Depends(get_session),
    service: CartService = Depends(get_cart_service),
):
    """
    Items due in the next `days` days and their estimated cost.
    """
    return service.due_within(session, days)


@router.post("/reminders/ack")
def acknowledge_reminder(
    payload: ReminderAck,
    session: Session = Depends(get_session),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> dict[str, int]:
    """
    Mark the entries of the shown reminder batch so they never come back.
    """
    return {"marked": scheduler.acknowledge(session, payload.ids)}
