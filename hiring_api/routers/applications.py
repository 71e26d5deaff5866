# 🔹 FILE: hiring_api/routers/applications.py
# ------------------------------
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from .. import schemas
from ..db import get_session
from ..errors import ValidationError
from ..security import require_staff
from ..services import applications as application_service
from ..services.attachments import AttachmentStore, get_attachment_store
from ..uploads import DOCUMENT_TYPES, read_upload

router = APIRouter()


def _listing(applications) -> dict:
    return {
        "success": True,
        "message": "Applications retrieved successfully",
        "count": len(applications),
        "applications": [schemas.ApplicationOut.from_model(a).model_dump(mode="json") for a in applications],
    }


def _submitted(application) -> dict:
    return {
        "success": True,
        "message": "Application submitted successfully",
        "application": schemas.ApplicationOut.from_model(application, with_career=False).model_dump(mode="json"),
    }


# ➕ Apply for a career
@router.post("/apply", status_code=status.HTTP_201_CREATED)
def apply_for_career(
    career_id: Optional[int] = Form(None),
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    cv: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    if career_id is None:
        raise ValidationError("All fields are required")
    application = application_service.submit_application(
        session, store, full_name, email, phone, read_upload(cv, DOCUMENT_TYPES), career_id=career_id
    )
    return _submitted(application)


# ➕ General application (no career)
@router.post("/apply-general", status_code=status.HTTP_201_CREATED)
def apply_general(
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    cv: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    application = application_service.submit_application(
        session, store, full_name, email, phone, read_upload(cv, DOCUMENT_TYPES)
    )
    return _submitted(application)


# 🗂️ List applications
@router.get("/")
def list_applications(session: Session = Depends(get_session)):
    return _listing(application_service.list_all(session))


@router.get("/byjob/{career_id}", dependencies=[Depends(require_staff)])
def list_career_applications(career_id: int, session: Session = Depends(get_session)):
    return _listing(application_service.list_by_career(session, career_id))


@router.get("/{application_id}")
def get_application(application_id: int, session: Session = Depends(get_session)):
    application = application_service.get_application(session, application_id)
    return {"success": True, "application": schemas.ApplicationDetailOut.from_model(application).model_dump(mode="json")}


@router.patch("/{application_id}/status", dependencies=[Depends(require_staff)])
def update_status(application_id: int, payload: schemas.StatusUpdateIn, session: Session = Depends(get_session)):
    application = application_service.set_status(session, application_id, payload.status)
    return {
        "success": True,
        "message": "Application status updated",
        "application": schemas.ApplicationOut.from_model(application, with_career=False).model_dump(mode="json"),
    }


@router.delete("/{application_id}", dependencies=[Depends(require_staff)])
def delete_application(
    application_id: int,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    application_service.delete_application(session, store, application_id)
    return {"success": True, "message": "Application deleted successfully"}


@router.post("/bulk-delete", dependencies=[Depends(require_staff)])
def bulk_delete_applications(
    payload: schemas.BulkDeleteIn,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    deleted = application_service.bulk_delete_applications(session, store, payload.ids)
    return {"success": True, "message": f"{deleted} applications deleted successfully", "deleted_count": deleted}
