# 🔹 FILE: hiring_api/routers/users.py
# --------------------------------------------------------------
# User administration (admin only)
# --------------------------------------------------------------
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from .. import schemas
from ..db import get_session
from ..models import Role
from ..security import require_admin
from ..services import users as user_service
from ..services.attachments import AttachmentStore, get_attachment_store
from ..uploads import IMAGE_TYPES, read_upload

router = APIRouter(dependencies=[Depends(require_admin)])


def _out(user) -> dict:
    return schemas.UserOut.from_model(user).model_dump(mode="json")


@router.get("/")
def list_users(session: Session = Depends(get_session)):
    users = user_service.list_users(session)
    return {"success": True, "count": len(users), "users": [_out(u) for u in users]}


@router.get("/{user_id}")
def get_user(user_id: int, session: Session = Depends(get_session)):
    return {"success": True, "user": _out(user_service.get_user(session, user_id))}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_user(
    user_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[Role] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    user = user_service.create_user(
        session, store, user_name, email, password, role, read_upload(image, IMAGE_TYPES)
    )
    return {"success": True, "message": "User created successfully", "user": _out(user)}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[Role] = Form(None),
    is_active: Optional[bool] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    user = user_service.update_user(
        session,
        store,
        user_id,
        user_name=user_name,
        email=email,
        password=password,
        role=role,
        is_active=is_active,
        image=read_upload(image, IMAGE_TYPES),
    )
    return {"success": True, "message": "User updated successfully", "user": _out(user)}


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    user_service.delete_user(session, store, user_id)
    return {"success": True, "message": "User deleted successfully"}


@router.post("/bulk-delete")
def bulk_delete_users(
    payload: schemas.BulkDeleteIn,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    deleted = user_service.bulk_delete_users(session, store, payload.ids)
    return {"success": True, "message": f"{deleted} user(s) deleted successfully", "deleted_count": deleted}
