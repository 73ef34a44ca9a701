# learnhub/routers/reviews.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import reviews
from ..auth import require_user
from ..database import get_db
from ..schemas import MessageOut, ReviewOut, ReviewUpdate
from ..sessions import Identity

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.put("/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    user: Identity = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ReviewOut.model_validate(reviews.update_review(db, user, review_id, payload))


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(review_id: int, user: Identity = Depends(require_user), db: Session = Depends(get_db)):
    reviews.delete_review(db, user, review_id)
    return MessageOut(message="Review deleted successfully")
