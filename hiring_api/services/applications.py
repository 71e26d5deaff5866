# 🔹 FILE: hiring_api/services/applications.py
# ==============================================================
# Application Lifecycle Manager
# - submit(): validate → career check → duplicate pre-check →
#             upload CV → insert (unique email+career)
# - list_all() / list_by_career() / get_application()
# - set_status(): permissive unless STRICT_STATUS_TRANSITIONS
# - delete_application() / bulk_delete_applications():
#             release CV first, never blocked by a failed release
# ==============================================================
import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..config import settings
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Application, ApplicationStatus, Career, utcnow
from ..uploads import IncomingFile
from ..utils.ids import parse_ids, short_id
from .attachments import AttachmentStore, project_folder, release

logger = logging.getLogger(__name__)

CV_FOLDER = ("Careers", "CVs")

# used only when STRICT_STATUS_TRANSITIONS is on
STRICT_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {ApplicationStatus.REVIEWED, ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}
    ),
    ApplicationStatus.REVIEWED: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


def cv_folder(custom_id: str) -> str:
    return project_folder(*CV_FOLDER, custom_id)


def _already_applied(session: Session, email: str, career_id: Optional[int]) -> bool:
    if career_id is None:
        # general applications carry no uniqueness key
        return False
    stmt = select(Application.id).where(Application.email == email, Application.career_id == career_id)
    return session.exec(stmt).first() is not None


def submit_application(
    session: Session,
    store: AttachmentStore,
    full_name: Optional[str],
    email: Optional[str],
    phone: Optional[str],
    cv: Optional[IncomingFile],
    career_id: Optional[int] = None,
) -> Application:
    if not full_name or not email or not phone:
        raise ValidationError("All fields are required")
    if cv is None:
        raise ValidationError("CV file is required")
    email = email.strip().lower()

    if career_id is not None:
        career = session.get(Career, career_id)
        if not career or not career.is_active:
            raise NotFoundError("Career not available")

    if _already_applied(session, email, career_id):
        raise ConflictError("You already applied for this position")

    custom_id = short_id()
    stored = store.upload(cv, cv_folder(custom_id))

    application = Application(
        career_id=career_id,
        full_name=full_name.strip(),
        email=email,
        phone=phone.strip(),
        cv_url=stored.url,
        cv_file_id=stored.file_id,
        custom_id=custom_id,
    )
    session.add(application)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        # the uploaded CV is left behind on purpose, the orphan sweep collects it
        logger.info("Duplicate application for %s / career %s, CV %s orphaned", email, career_id, stored.file_id)
        raise ConflictError("You already applied for this position")

    logger.info("Application %s submitted (career=%s)", application.id, career_id)
    return application


def _listing(session: Session, career_id: Optional[int] = None) -> List[Application]:
    stmt = select(Application).options(selectinload(Application.career))
    if career_id is not None:
        stmt = stmt.where(Application.career_id == career_id)
    stmt = stmt.order_by(Application.created_at.desc(), Application.id.desc())
    return list(session.exec(stmt).all())


def list_all(session: Session) -> List[Application]:
    return _listing(session)


def list_by_career(session: Session, career_id: int) -> List[Application]:
    """An empty result is an error here, callers rely on the 404."""
    applications = _listing(session, career_id)
    if not applications:
        raise NotFoundError("No applications found for this job")
    return applications


def get_application(session: Session, application_id: int) -> Application:
    application = session.exec(
        select(Application).options(selectinload(Application.career)).where(Application.id == application_id)
    ).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


def set_status(session: Session, application_id: int, status) -> Application:
    try:
        new_status = ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(f"Status must be one of: {allowed}") from None

    application = session.get(Application, application_id)
    if not application:
        raise NotFoundError("Application not found")

    if settings.STRICT_STATUS_TRANSITIONS and new_status != application.status:
        if new_status not in STRICT_TRANSITIONS[application.status]:
            raise ConflictError(f"Cannot move application from {application.status.value} to {new_status.value}")

    application.status = new_status
    application.updated_at = utcnow()
    session.add(application)
    session.commit()
    session.refresh(application)
    return application


def _delete_with_cv(session: Session, store: AttachmentStore, application: Application) -> None:
    release(store, application.cv_file_id, owner=f"application {application.id}")
    session.delete(application)


def delete_application(session: Session, store: AttachmentStore, application_id: int) -> None:
    application = session.get(Application, application_id)
    if not application:
        raise NotFoundError("Application not found")

    _delete_with_cv(session, store, application)
    session.commit()
    logger.info("Application %s deleted", application_id)


def bulk_delete_applications(session: Session, store: AttachmentStore, ids) -> int:
    parsed = parse_ids(ids)
    applications = session.exec(select(Application).where(Application.id.in_(parsed))).all()
    if not applications:
        raise NotFoundError("No applications found to delete")

    for application in applications:
        _delete_with_cv(session, store, application)
    session.commit()
    logger.info("Bulk deleted %d application(s)", len(applications))
    return len(applications)
