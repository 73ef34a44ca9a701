"""
Review aggregator

Every review write recomputes courses.rating / courses.review_count in the
same transaction, as a single UPDATE with aggregate subqueries.
"""

import logging
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from .catalog import get_course
from .enrollments import is_enrolled
from .errors import AuthorizationError, NotFoundError
from .models import Course, Review, User
from .schemas import ReviewCreate, ReviewUpdate
from .sessions import Identity

logger = logging.getLogger(__name__)


def recompute_rating(db: Session, course_id: int) -> None:
    """Mean rating rounded to one decimal (NULL with no reviews) and the review count."""
    average = (
        select(func.round(func.avg(Review.rating), 1))
        .where(Review.course_id == course_id)
        .scalar_subquery()
    )
    count = select(func.count(Review.id)).where(Review.course_id == course_id).scalar_subquery()
    db.execute(
        update(Course)
        .where(Course.id == course_id)
        .values(rating=average, review_count=count, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )


def list_reviews(db: Session, course_id: int) -> List[Review]:
    get_course(db, course_id)
    return (
        db.query(Review)
        .options(joinedload(Review.user).joinedload(User.profile))
        .filter(Review.course_id == course_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def get_review(db: Session, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")
    return review


def create_review(
    db: Session, user_id: int, course_id: int, data: ReviewCreate, one_per_user: bool = False
) -> Tuple[Review, bool]:
    """
    Only enrolled users may review. With one_per_user the user's earlier
    review for the course is overwritten instead of adding a row.
    Returns (review, created).
    """
    get_course(db, course_id)
    if not is_enrolled(db, user_id, course_id):
        raise AuthorizationError("You must be enrolled in this course to review it")

    review = None
    if one_per_user:
        review = (
            db.query(Review)
            .filter(Review.user_id == user_id, Review.course_id == course_id)
            .order_by(Review.id.asc())
            .first()
        )

    created = review is None
    if created:
        review = Review(user_id=user_id, course_id=course_id, **data.model_dump())
        db.add(review)
    else:
        for key, value in data.model_dump().items():
            setattr(review, key, value)
        review.updated_at = datetime.utcnow()

    db.flush()
    recompute_rating(db, course_id)
    db.commit()
    db.refresh(review)
    logger.info("Review %s on course %s by user %s", review.id, course_id, user_id)
    return review, created


def _ensure_can_modify(review: Review, identity: Identity):
    if review.user_id != identity.id and not identity.is_admin:
        raise AuthorizationError("You can only change your own reviews")


def update_review(db: Session, identity: Identity, review_id: int, data: ReviewUpdate) -> Review:
    review = get_review(db, review_id)
    _ensure_can_modify(review, identity)

    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(review, key, value)
    review.updated_at = datetime.utcnow()

    db.flush()
    recompute_rating(db, review.course_id)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, identity: Identity, review_id: int) -> None:
    review = get_review(db, review_id)
    _ensure_can_modify(review, identity)
    course_id = review.course_id

    db.delete(review)
    db.flush()
    recompute_rating(db, course_id)
    db.commit()
    logger.info("Deleted review %s on course %s", review_id, course_id)
