from typing import List
from fastapi import APIRouter, Depends
from ...core.security import CurrentUser, get_current_user
from ...schemas.categories import CategoryIn, CategoryOut, CategoryUpdate
from ...services.store import RecordStore
from ..deps import get_store

router = APIRouter()

@router.get("/categories", response_model=List[CategoryOut])
def list_all(user: CurrentUser = Depends(get_current_user), store: RecordStore = Depends(get_store)):
    return store.list_categories(user.id)

@router.post("/categories", response_model=CategoryOut)
def create(body: CategoryIn, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    return store.create_category(user.id, body.model_dump())

@router.put("/categories/{category_id}", response_model=CategoryOut)
def update(category_id: str, body: CategoryUpdate, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    return store.update_category(user.id, category_id, body.model_dump(exclude_unset=True, exclude_none=True))

@router.delete("/categories/{category_id}")
def delete(category_id: str, user: CurrentUser = Depends(get_current_user),
           store: RecordStore = Depends(get_store)):
    store.delete_category(user.id, category_id)
    return {"success": True}
