# 🔹 FILE: hiring_api/services/careers.py
# --------------------------------------------------------------
# Career Lifecycle Manager
# - create / update (partial) / toggle active
# - list with language aware filters (department, location, type)
# - delete / bulk delete
# --------------------------------------------------------------
import logging
from typing import List, Optional

from sqlmodel import Session, select

from ..errors import NotFoundError
from ..models import Career, utcnow
from ..schemas import BilingualList, BilingualText, CareerCreate, CareerUpdate, Lang
from ..utils.ids import parse_ids
from ..utils.normalize import norm_employment_type_en

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "department", "location", "employment_type", "short_description", "description")
LIST_FIELDS = ("responsibilities", "requirements")
REQUIRED_FIELDS = ("title", "department", "location", "employment_type")


def _set_pair(career: Career, name: str, value: Optional[BilingualText]) -> None:
    setattr(career, f"{name}_en", value.en if value else None)
    setattr(career, f"{name}_ar", value.ar if value else None)


def _set_list_pair(career: Career, name: str, value: Optional[BilingualList]) -> None:
    setattr(career, f"{name}_en", list(value.en) if value else [])
    setattr(career, f"{name}_ar", list(value.ar) if value else [])


def create_career(session: Session, payload: CareerCreate) -> Career:
    career = Career(
        title_en=payload.title.en,
        title_ar=payload.title.ar,
        department_en=payload.department.en,
        department_ar=payload.department.ar,
        location_en=payload.location.en,
        location_ar=payload.location.ar,
        employment_type_en=payload.employment_type.en,
        employment_type_ar=payload.employment_type.ar,
        is_active=payload.is_active,
        order=payload.order,
    )
    for name in ("short_description", "description"):
        _set_pair(career, name, getattr(payload, name))
    for name in LIST_FIELDS:
        _set_list_pair(career, name, getattr(payload, name))

    session.add(career)
    session.commit()
    session.refresh(career)
    logger.info("Career %s created (%s)", career.id, career.title_en)
    return career


def list_careers(
    session: Session,
    department: Optional[str] = None,
    location: Optional[str] = None,
    employment_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    lang: Lang = "en",
) -> List[Career]:
    """Filters compare against the column of the requested language."""
    stmt = select(Career)
    if department:
        stmt = stmt.where(getattr(Career, f"department_{lang}") == department)
    if location:
        stmt = stmt.where(getattr(Career, f"location_{lang}") == location)
    if employment_type:
        value = norm_employment_type_en(employment_type) if lang == "en" else employment_type
        stmt = stmt.where(getattr(Career, f"employment_type_{lang}") == value)
    if is_active is not None:
        stmt = stmt.where(Career.is_active == is_active)

    stmt = stmt.order_by(Career.created_at.desc(), Career.id.desc())
    return list(session.exec(stmt).all())


def get_career(session: Session, career_id: int) -> Career:
    career = session.get(Career, career_id)
    if not career:
        raise NotFoundError("Career not found")
    return career


def update_career(session: Session, career_id: int, payload: CareerUpdate) -> Career:
    career = get_career(session, career_id)

    # only the fields that were actually sent
    sent = payload.model_fields_set
    for name in TEXT_FIELDS:
        value = getattr(payload, name)
        if name in sent and (value is not None or name not in REQUIRED_FIELDS):
            _set_pair(career, name, value)
    for name in LIST_FIELDS:
        if name in sent:
            _set_list_pair(career, name, getattr(payload, name))
    if "is_active" in sent and payload.is_active is not None:
        career.is_active = payload.is_active
    if "order" in sent:
        career.order = payload.order

    career.updated_at = utcnow()
    session.add(career)
    session.commit()
    session.refresh(career)
    return career


def toggle_career(session: Session, career_id: int) -> Career:
    career = get_career(session, career_id)
    career.is_active = not career.is_active
    career.updated_at = utcnow()
    session.add(career)
    session.commit()
    session.refresh(career)
    return career


def delete_career(session: Session, career_id: int) -> None:
    career = get_career(session, career_id)
    session.delete(career)
    session.commit()
    logger.info("Career %s deleted", career_id)


def bulk_delete_careers(session: Session, ids) -> int:
    parsed = parse_ids(ids)
    careers = session.exec(select(Career).where(Career.id.in_(parsed))).all()
    if not careers:
        raise NotFoundError("No careers found for the provided IDs")

    for career in careers:
        session.delete(career)
    session.commit()
    logger.info("Bulk deleted %d career(s)", len(careers))
    return len(careers)
