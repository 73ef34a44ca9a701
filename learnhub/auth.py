"""
Request identity and route guards

Guards only read; they never write to the database or the session.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .database import get_db
from .errors import AuthenticationError, AuthorizationError
from .sessions import SESSION_KEY, Identity, resolve_session


def get_identity(request: Request, db: Session = Depends(get_db)) -> Optional[Identity]:
    user = resolve_session(db, request.session.get(SESSION_KEY))
    if user is None:
        return None
    return Identity(id=user.id, username=user.username, is_admin=bool(user.is_admin))


def require_user(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise AuthenticationError()
    return identity


def require_admin(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise AuthenticationError()
    if not identity.is_admin:
        raise AuthorizationError("Forbidden: Admin access required")
    return identity
