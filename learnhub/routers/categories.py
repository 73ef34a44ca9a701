# learnhub/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import catalog
from ..auth import require_admin
from ..database import get_db
from ..schemas import CategoryCreate, CategoryOut, CategoryUpdate, CourseOut, MessageOut
from ..sessions import Identity

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return [CategoryOut.model_validate(c) for c in catalog.list_categories(db)]


@router.get("/{slug}", response_model=CategoryOut)
def get_category(slug: str, db: Session = Depends(get_db)):
    return CategoryOut.model_validate(catalog.get_category_by_slug(db, slug))


@router.get("/{slug}/courses", response_model=List[CourseOut])
def list_category_courses(slug: str, db: Session = Depends(get_db)):
    return [CourseOut.model_validate(c) for c in catalog.list_courses(db, category_slug=slug)]


# --- Admin ---

@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return CategoryOut.model_validate(catalog.create_category(db, payload))


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CategoryOut.model_validate(catalog.update_category(db, category_id, payload))


@router.delete("/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int,
    confirm: bool = False,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    catalog.delete_category(db, category_id, cascade=confirm)
    return MessageOut(message="Category deleted successfully")
