from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import require_auth
from app.db import get_session
from app.schemas import CategoryIn, CategoryOut, SuccessResult
from app.services import categories as category_service

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(session: Session = Depends(get_session)) -> Any:
    return category_service.list_categories(session)


@router.post("", response_model=CategoryOut, dependencies=[Depends(require_auth)])
def create_category(payload: CategoryIn, session: Session = Depends(get_session)) -> Any:
    """Create a category. An empty parentId creates a root category."""
    return category_service.create_category(session, payload.name, payload.parent_id)


@router.delete("/{category_id}", response_model=SuccessResult, dependencies=[Depends(require_auth)])
def delete_category(category_id: str, session: Session = Depends(get_session)) -> Any:
    """
    Delete a category.

    Refused with 400 while posts or subcategories still reference it.
    """
    category_service.delete_category(session, category_id)
    return SuccessResult(success=True)
