from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_db, require_admin
from certportal.schemas.dashboard import DashboardStats
from certportal.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=DashboardStats)
def stats(db: Session = Depends(get_db)):
    with service_errors(db, "fetch dashboard stats"):
        return dashboard_service.get_stats(db)
