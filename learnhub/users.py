# learnhub/users.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .errors import AuthenticationError, DuplicateUsernameError, NotFoundError
from .models import Profile, User
from .schemas import ProfileRequest, RegisterRequest
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).options(joinedload(User.profile)).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).options(joinedload(User.profile)).filter(User.username == username).first()


def register_user(db: Session, data: RegisterRequest) -> User:
    """Public registration. The account is never an admin."""
    if get_user_by_username(db, data.username):
        raise DuplicateUsernameError()

    user = User(
        username=data.username,
        password=hash_password(data.password),
        email=data.email,
        is_admin=False,
        has_completed_profile=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race on the unique username
        db.rollback()
        raise DuplicateUsernameError()
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login for username %r", username)
        raise AuthenticationError("Invalid credentials")
    return user


def get_profile(db: Session, user_id: int) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


def save_profile(db: Session, user_id: int, data: ProfileRequest) -> User:
    """Create the profile or update the supplied fields, and mark the profile as completed."""
    user = get_user(db, user_id)
    fields = data.model_dump(exclude_unset=True)

    if user.profile is None:
        user.profile = Profile(**fields)
    else:
        for key, value in fields.items():
            if value is not None:
                setattr(user.profile, key, value)
        user.profile.updated_at = datetime.utcnow()

    user.has_completed_profile = True
    db.commit()
    db.refresh(user)
    return user


def provision_admin(db: Session, username: str, password: Optional[str] = None, email: Optional[str] = None):
    """
    Create an admin account, or promote an existing user.

    Only the operator CLI calls this; no HTTP route reaches it.
    Returns (user, created).
    """
    user = get_user_by_username(db, username)
    if user:
        user.is_admin = True
        if password:
            user.password = hash_password(password)
        if email:
            user.email = email
        db.commit()
        db.refresh(user)
        logger.info("Promoted user %s to admin", username)
        return user, False

    if not password:
        raise ValueError("A password is required to create a new admin")
    user = User(
        username=username,
        password=hash_password(password),
        email=email,
        is_admin=True,
        has_completed_profile=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created admin user %s (id=%s)", username, user.id)
    return user, True
