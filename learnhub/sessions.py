"""
Server-side session store

A session is a row in user_sessions keyed by an opaque random token.
Only the token goes into the (signed) session cookie.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from . import config
from .models import User, UserSession

logger = logging.getLogger(__name__)

SESSION_KEY = "sid"


@dataclass(frozen=True)
class Identity:
    """Who is making a request. Passed explicitly into repository calls."""

    id: int
    username: str
    is_admin: bool = False


def create_session(db: Session, user_id: int, ttl_seconds: Optional[int] = None) -> str:
    ttl = config.SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    now = datetime.utcnow()
    purge_expired(db, now)

    token = secrets.token_urlsafe(32)
    db.add(UserSession(token=token, user_id=user_id, created_at=now, expires_at=now + timedelta(seconds=ttl)))
    db.commit()
    return token


def resolve_session(db: Session, token: Optional[str]) -> Optional[User]:
    """Return the user behind a live session token, or None. Read-only."""
    if not token:
        return None
    row = (
        db.query(UserSession)
        .filter(UserSession.token == token, UserSession.expires_at > datetime.utcnow())
        .first()
    )
    return row.user if row else None


def destroy_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    db.query(UserSession).filter(UserSession.token == token).delete(synchronize_session=False)
    db.commit()


def purge_expired(db: Session, now: Optional[datetime] = None) -> int:
    removed = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= (now or datetime.utcnow()))
        .delete(synchronize_session=False)
    )
    if removed:
        logger.info("Purged %d expired sessions", removed)
    return removed
