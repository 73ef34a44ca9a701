# learnhub/contact.py
import logging
from typing import List

from sqlalchemy.orm import Session

from .errors import NotFoundError
from .models import ContactSubmission
from .schemas import ContactCreate

logger = logging.getLogger(__name__)


def submit_contact(db: Session, data: ContactCreate) -> ContactSubmission:
    submission = ContactSubmission(**data.model_dump(), is_read=False)
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info("Contact submission %s (%s)", submission.id, submission.purpose)
    return submission


def list_contacts(db: Session) -> List[ContactSubmission]:
    return (
        db.query(ContactSubmission)
        .order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
        .all()
    )


def get_contact(db: Session, submission_id: int) -> ContactSubmission:
    submission = db.query(ContactSubmission).filter(ContactSubmission.id == submission_id).first()
    if not submission:
        raise NotFoundError("Contact submission not found")
    return submission


def mark_contact_read(db: Session, submission_id: int) -> ContactSubmission:
    submission = get_contact(db, submission_id)
    submission.is_read = True
    db.commit()
    db.refresh(submission)
    return submission


def delete_contact(db: Session, submission_id: int) -> None:
    submission = get_contact(db, submission_id)
    db.delete(submission)
    db.commit()
