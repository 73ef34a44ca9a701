# learnhub/routers/contact.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import contact
from ..auth import require_admin
from ..database import get_db
from ..schemas import ContactCreate, ContactOut, MessageOut
from ..sessions import Identity

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", response_model=ContactOut, status_code=201)
def submit(payload: ContactCreate, db: Session = Depends(get_db)):
    return ContactOut.model_validate(contact.submit_contact(db, payload))


@router.get("", response_model=List[ContactOut])
def list_submissions(admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return [ContactOut.model_validate(s) for s in contact.list_contacts(db)]


@router.get("/{submission_id}", response_model=ContactOut)
def get_submission(submission_id: int, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return ContactOut.model_validate(contact.get_contact(db, submission_id))


@router.put("/{submission_id}/read", response_model=ContactOut)
def mark_read(submission_id: int, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return ContactOut.model_validate(contact.mark_contact_read(db, submission_id))


@router.delete("/{submission_id}", response_model=MessageOut)
def delete_submission(submission_id: int, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    contact.delete_contact(db, submission_id)
    return MessageOut(message="Contact submission deleted successfully")
