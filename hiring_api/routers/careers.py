# 🔹 FILE: hiring_api/routers/careers.py
# --------------------------------------------------------------
# Careers Router
# - GET  /careers            → list with optional filters (lang aware)
# - GET  /careers/lang/{l}   → single language projection
# - POST /careers/create     → admin / HR
# - PUT, PATCH toggle, DELETE, POST bulk-delete → admin / HR
# --------------------------------------------------------------
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas
from ..db import get_session
from ..security import require_staff
from ..services import careers as career_service

router = APIRouter()


def _out(career) -> dict:
    return schemas.CareerOut.from_model(career).model_dump(mode="json")


@router.post("/create", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_staff)])
def create_career(payload: schemas.CareerCreate, session: Session = Depends(get_session)):
    career = career_service.create_career(session, payload)
    return {"success": True, "message": "Career created successfully", "data": _out(career)}


@router.get("/")
def list_careers(
    department: Optional[str] = Query(None, description="filter on the department in `lang`"),
    location: Optional[str] = Query(None, description="filter on the location in `lang`"),
    employment_type: Optional[str] = Query(None, description="Full-Time / Part-Time / Contract (or Arabic)"),
    is_active: Optional[bool] = None,
    lang: schemas.Lang = "en",
    session: Session = Depends(get_session),
):
    careers = career_service.list_careers(
        session,
        department=department,
        location=location,
        employment_type=employment_type,
        is_active=is_active,
        lang=lang,
    )
    return {"success": True, "lang": lang, "count": len(careers), "careers": [_out(c) for c in careers]}


@router.get("/lang/{lang}")
def list_localized(lang: schemas.Lang, session: Session = Depends(get_session)):
    careers = career_service.list_careers(session)
    return {
        "success": True,
        "lang": lang,
        "count": len(careers),
        "careers": [schemas.CareerOut.from_model(c).localized(lang) for c in careers],
    }


@router.get("/{career_id}")
def get_career(career_id: int, session: Session = Depends(get_session)):
    return {"success": True, "career": _out(career_service.get_career(session, career_id))}


@router.put("/{career_id}", dependencies=[Depends(require_staff)])
def update_career(career_id: int, payload: schemas.CareerUpdate, session: Session = Depends(get_session)):
    career = career_service.update_career(session, career_id, payload)
    return {"success": True, "message": "Career updated successfully", "data": _out(career)}


@router.patch("/{career_id}/toggle", dependencies=[Depends(require_staff)])
def toggle_career(career_id: int, session: Session = Depends(get_session)):
    career = career_service.toggle_career(session, career_id)
    return {"success": True, "message": "Career status updated", "career": _out(career)}


@router.delete("/{career_id}", dependencies=[Depends(require_staff)])
def delete_career(career_id: int, session: Session = Depends(get_session)):
    career_service.delete_career(session, career_id)
    return {"success": True, "message": "Career deleted successfully"}


@router.post("/bulk-delete", dependencies=[Depends(require_staff)])
def bulk_delete_careers(payload: schemas.BulkDeleteIn, session: Session = Depends(get_session)):
    deleted = career_service.bulk_delete_careers(session, payload.ids)
    return {"success": True, "message": f"{deleted} career(s) deleted successfully", "deleted_count": deleted}
