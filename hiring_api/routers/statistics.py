# 🔹 FILE: hiring_api/routers/statistics.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..db import get_session
from ..services.statistics import dashboard_stats

router = APIRouter()


# 📊 Dashboard counters
@router.get("/")
def get_dashboard_stats(session: Session = Depends(get_session)):
    return {"success": True, "stats": dashboard_stats(session).model_dump()}
