# learnhub/routers/auth.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from .. import users
from ..auth import require_user
from ..database import get_db
from ..schemas import LoginRequest, MessageOut, ProfileOut, ProfileRequest, RegisterRequest, UserOut
from ..sessions import SESSION_KEY, Identity, create_session, destroy_session

router = APIRouter(prefix="/api", tags=["auth"])


def _start_session(request: Request, db: Session, user_id: int):
    # drop whatever session the browser was carrying before
    destroy_session(db, request.session.get(SESSION_KEY))
    request.session.clear()
    request.session[SESSION_KEY] = create_session(db, user_id)


# --- Registration / login ---

@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    user = users.register_user(db, payload)
    _start_session(request, db, user.id)
    return UserOut.model_validate(users.get_user(db, user.id))


@router.post("/login", response_model=UserOut)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = users.authenticate(db, payload.username, payload.password)
    _start_session(request, db, user.id)
    return UserOut.model_validate(user)


@router.post("/logout", response_model=MessageOut)
def logout(request: Request, identity: Identity = Depends(require_user), db: Session = Depends(get_db)):
    destroy_session(db, request.session.get(SESSION_KEY))
    request.session.clear()
    return MessageOut(message="Logged out successfully")


@router.get("/user", response_model=UserOut)
def current_user(identity: Identity = Depends(require_user), db: Session = Depends(get_db)):
    return UserOut.model_validate(users.get_user(db, identity.id))


# --- Profile ---

@router.get("/profile", response_model=ProfileOut)
def get_profile(identity: Identity = Depends(require_user), db: Session = Depends(get_db)):
    return ProfileOut.model_validate(users.get_profile(db, identity.id))


@router.post("/profile", response_model=UserOut)
def save_profile(payload: ProfileRequest, identity: Identity = Depends(require_user), db: Session = Depends(get_db)):
    return UserOut.model_validate(users.save_profile(db, identity.id, payload))
