# grocery_app/routers/catalog.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from grocery_app.database import get_session
from grocery_app.dependencies import get_catalog_service
from grocery_app.schemas.catalog import CategoryAssign, GroceryItemRead
from grocery_app.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("", response_model=list[GroceryItemRead])
def search_items(
    q: str = "",
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Search the catalog by name.

    - Empty `q` returns the whole catalog.
    - Matching is a case-insensitive substring match, in catalog order.
    """
    return service.search_items(session, q)


@router.get("/categories", response_model=list[str])
def list_categories(
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Categories users have assigned so far, sorted.
    """
    return service.list_categories(session)


@router.get("/category/{category}", response_model=list[GroceryItemRead])
def get_items_by_category(
    category: str,
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Items in a category (case-insensitive). Unknown category -> [].
    """
    return service.get_items_by_category(session, category)


@router.get("/{item_id}", response_model=GroceryItemRead)
def get_item(
    item_id: int,
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_item(session, item_id)


@router.patch("/{item_id}/category", response_model=GroceryItemRead)
def assign_category(
    item_id: int,
    payload: CategoryAssign,
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Assign (or overwrite) the category of a catalog item.
    """
    if not service.assign_category(session, item_id, payload.category):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Catalog item not found",
        )
    return service.get_item(session, item_id)
