# learnhub/routers/admin.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from .. import stats
from ..auth import require_admin
from ..database import get_db
from ..errors import NotFoundError
from ..schemas import DashboardStats
from ..sessions import Identity

router = APIRouter(prefix="/api", tags=["admin"])


@router.get("/admin/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return DashboardStats(**stats.dashboard_stats(db))


@router.get("/admin/{entity}/count", response_model=int)
def entity_count(entity: str, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    model = stats.COUNTABLE.get(entity)
    if model is None:
        raise NotFoundError(f"Unknown entity '{entity}'")
    return stats.count(db, model)


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
