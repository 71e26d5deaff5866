# 🔹 FILE: hiring_api/services/statistics.py
from sqlalchemy import func
from sqlmodel import Session, select

from ..models import Application, Career, ServiceSection
from ..schemas import StatsOut


def _count(session: Session, model) -> int:
    return session.exec(select(func.count()).select_from(model)).one()


def dashboard_stats(session: Session) -> StatsOut:
    return StatsOut(
        applications=_count(session, Application),
        services=_count(session, ServiceSection),
        careers=_count(session, Career),
    )
