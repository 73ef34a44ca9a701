# learnhub/stats.py
from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Category, ContactSubmission, Course, Enrollment, Review, User

COUNTABLE = {
    "users": User,
    "courses": Course,
    "categories": Category,
    "enrollments": Enrollment,
}


def count(db: Session, model) -> int:
    return db.query(func.count(model.id)).scalar()


def dashboard_stats(db: Session) -> dict:
    stats = {name: count(db, model) for name, model in COUNTABLE.items()}
    stats["completed_enrollments"] = (
        db.query(func.count(Enrollment.id)).filter(Enrollment.completed.is_(True)).scalar()
    )
    stats["reviews"] = count(db, Review)
    stats["unread_contacts"] = (
        db.query(func.count(ContactSubmission.id)).filter(ContactSubmission.is_read.is_(False)).scalar()
    )
    return stats
