# learnhub/enrollments.py
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .catalog import get_course
from .errors import NotFoundError, ValidationError
from .models import Course, Enrollment

logger = logging.getLogger(__name__)


def get_enrollment(db: Session, user_id: int, course_id: int) -> Optional[Enrollment]:
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        .first()
    )


def is_enrolled(db: Session, user_id: int, course_id: int) -> bool:
    return get_enrollment(db, user_id, course_id) is not None


def enroll(db: Session, user_id: int, course_id: int) -> Tuple[Enrollment, bool]:
    """
    Idempotent: an existing enrollment is returned as is.
    Returns (enrollment, created).
    """
    get_course(db, course_id)

    existing = get_enrollment(db, user_id, course_id)
    if existing:
        return existing, False

    enrollment = Enrollment(user_id=user_id, course_id=course_id, progress=0, completed=False)
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        # a parallel request enrolled first; the unique constraint keeps one row
        db.rollback()
        return get_enrollment(db, user_id, course_id), False

    db.refresh(enrollment)
    logger.info("User %s enrolled in course %s", user_id, course_id)
    return enrollment, True


def set_progress(db: Session, user_id: int, course_id: int, progress: int) -> Enrollment:
    if progress < 0 or progress > 100:
        raise ValidationError.for_field("progress", "Progress must be between 0 and 100")

    enrollment = get_enrollment(db, user_id, course_id)
    if not enrollment:
        raise NotFoundError("Not enrolled in this course")

    enrollment.progress = progress
    enrollment.completed = progress == 100
    enrollment.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(enrollment)
    return enrollment


def list_for_user(db: Session, user_id: int) -> List[Enrollment]:
    """Newest first, with course and category loaded."""
    return (
        db.query(Enrollment)
        .options(joinedload(Enrollment.course).joinedload(Course.category))
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
        .all()
    )
