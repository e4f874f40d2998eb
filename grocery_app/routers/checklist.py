# grocery_app/routers/checklist.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from grocery_app.database import get_session
from grocery_app.dependencies import get_cart_service, get_checklist_service
from grocery_app.schemas.checklist import ChecklistCreate, ChecklistStatus
from grocery_app.services.cart_service import CartService
from grocery_app.services.checklist_service import ChecklistService

router = APIRouter(prefix="/checklist", tags=["Checklist"])


@router.post("", response_model=ChecklistStatus, status_code=status.HTTP_201_CREATED)
def create_checklist(
    payload: ChecklistCreate,
    session: Session = Depends(get_session),
    checklists: ChecklistService = Depends(get_checklist_service),
    cart: CartService = Depends(get_cart_service),
):
    """
    Create the active checklist from catalog item ids.

    Replacing an existing checklist needs `overwrite: true` (409 otherwise).
    """
    checklists.create(session, payload.name, payload.item_ids, overwrite=payload.overwrite)
    return checklists.status(cart.list_entries(session))


@router.get("", response_model=ChecklistStatus)
def get_checklist(
    session: Session = Depends(get_session),
    checklists: ChecklistService = Depends(get_checklist_service),
    cart: CartService = Depends(get_cart_service),
):
    """
    Active checklist with progress against the current cart.
    """
    return checklists.status(cart.list_entries(session))
