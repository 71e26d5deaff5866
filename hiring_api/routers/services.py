# 🔹 FILE: hiring_api/routers/services.py
# --------------------------------------------------------------
# Services Router (marketing catalog)
# Multipart forms send bilingual values as <field>_en / <field>_ar.
# Reviews are public, every other write is admin / HR.
# --------------------------------------------------------------
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from .. import schemas
from ..db import get_session
from ..schemas import bilingual_from_form
from ..security import require_staff
from ..services import catalog
from ..services.attachments import AttachmentStore, get_attachment_store
from ..uploads import IMAGE_TYPES, read_upload, read_uploads

router = APIRouter()


def _out(section) -> dict:
    return schemas.SectionOut.from_model(section).model_dump(mode="json")


# 🧩 Sections
@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_staff)])
def create_section(
    title_en: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    sub_title_en: Optional[str] = Form(None),
    sub_title_ar: Optional[str] = Form(None),
    description_en: Optional[str] = Form(None),
    description_ar: Optional[str] = Form(None),
    is_active: bool = Form(True),
    services: Optional[str] = Form(None, description="JSON array of items, one `service_images` file each"),
    main_image: Optional[UploadFile] = File(None),
    service_images: Optional[List[UploadFile]] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    header = schemas.SectionHeaderIn(
        title=bilingual_from_form(title_en, title_ar),
        sub_title=bilingual_from_form(sub_title_en, sub_title_ar),
        description=bilingual_from_form(description_en, description_ar),
    )
    items = schemas.ServiceItemList.validate_json(services) if services else []
    section = catalog.create_section(
        session,
        store,
        header,
        is_active,
        read_upload(main_image, IMAGE_TYPES),
        items=items,
        item_images=read_uploads(service_images, IMAGE_TYPES),
    )
    return {"success": True, "message": "Services created/updated successfully", "data": _out(section)}


@router.get("/")
def list_sections(session: Session = Depends(get_session)):
    sections = catalog.list_sections(session)
    return {"success": True, "count": len(sections), "services": [_out(s) for s in sections]}


@router.get("/lang/{lang}")
def list_localized(lang: schemas.Lang, session: Session = Depends(get_session)):
    sections = catalog.list_sections(session)
    return {
        "success": True,
        "lang": lang,
        "services": [schemas.SectionOut.from_model(s).localized(lang) for s in sections],
    }


@router.get("/{section_id}")
def get_section(section_id: int, session: Session = Depends(get_session)):
    return {"success": True, "service": _out(catalog.get_section(session, section_id))}


@router.put("/{section_id}", dependencies=[Depends(require_staff)])
def update_section(
    section_id: int,
    title_en: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    sub_title_en: Optional[str] = Form(None),
    sub_title_ar: Optional[str] = Form(None),
    description_en: Optional[str] = Form(None),
    description_ar: Optional[str] = Form(None),
    is_active: Optional[bool] = Form(None),
    main_image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    patch = schemas.SectionHeaderPatch(
        title=bilingual_from_form(title_en, title_ar),
        sub_title=bilingual_from_form(sub_title_en, sub_title_ar),
        description=bilingual_from_form(description_en, description_ar),
    )
    section = catalog.update_section(
        session, store, section_id, patch, is_active=is_active, image=read_upload(main_image, IMAGE_TYPES)
    )
    return {"success": True, "message": "Service section updated successfully", "data": _out(section)}


@router.patch("/{section_id}/toggle", dependencies=[Depends(require_staff)])
def toggle_section(section_id: int, session: Session = Depends(get_session)):
    section = catalog.toggle_section(session, section_id)
    return {"success": True, "message": "Service section status updated", "data": _out(section)}


@router.delete("/{section_id}", dependencies=[Depends(require_staff)])
def delete_section(
    section_id: int,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    catalog.delete_section(session, store, section_id)
    return {"success": True, "message": "Service section deleted successfully"}


@router.post("/bulk-delete", dependencies=[Depends(require_staff)])
def bulk_delete_sections(
    payload: schemas.BulkDeleteIn,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    deleted = catalog.bulk_delete_sections(session, store, payload.ids)
    return {"success": True, "message": "Services deleted successfully", "deleted_count": deleted}


# 🧱 Items
@router.post("/{section_id}/items", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_staff)])
def add_item(
    section_id: int,
    title_en: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    category_en: Optional[str] = Form(None),
    category_ar: Optional[str] = Form(None),
    description_en: Optional[str] = Form(None),
    description_ar: Optional[str] = Form(None),
    order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    payload = schemas.ServiceItemIn(
        title=bilingual_from_form(title_en, title_ar),
        category=bilingual_from_form(category_en, category_ar),
        description=bilingual_from_form(description_en, description_ar),
        order=order,
    )
    section = catalog.add_item(session, store, section_id, payload, read_upload(image, IMAGE_TYPES))
    return {"success": True, "message": "Service item added successfully", "data": _out(section)}


@router.put("/{section_id}/items/{item_id}", dependencies=[Depends(require_staff)])
def update_item(
    section_id: int,
    item_id: int,
    title_en: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    category_en: Optional[str] = Form(None),
    category_ar: Optional[str] = Form(None),
    description_en: Optional[str] = Form(None),
    description_ar: Optional[str] = Form(None),
    order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    patch = schemas.ServiceItemPatch(
        title=bilingual_from_form(title_en, title_ar),
        category=bilingual_from_form(category_en, category_ar),
        description=bilingual_from_form(description_en, description_ar),
        order=order,
    )
    section = catalog.update_item(session, store, section_id, item_id, patch, read_upload(image, IMAGE_TYPES))
    return {"success": True, "message": "Service item updated successfully", "data": _out(section)}


@router.delete("/{section_id}/items/{item_id}", dependencies=[Depends(require_staff)])
def delete_item(
    section_id: int,
    item_id: int,
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    section = catalog.delete_item(session, store, section_id, item_id)
    return {"success": True, "message": "Service item deleted successfully", "data": _out(section)}


# ⭐ Reviews
@router.post("/{section_id}/reviews", status_code=status.HTTP_201_CREATED)
def add_review(
    section_id: int,
    author_name: Optional[str] = Form(None),
    rating: Optional[float] = Form(None),
    body: str = Form(""),
    screenshots: Optional[List[UploadFile]] = File(None),
    session: Session = Depends(get_session),
    store: AttachmentStore = Depends(get_attachment_store),
):
    payload = schemas.ReviewIn(author_name=author_name, rating=rating, body=body)
    review = catalog.add_review(session, store, section_id, payload, read_uploads(screenshots, IMAGE_TYPES))
    return {
        "success": True,
        "message": "Review added successfully",
        "review": schemas.ReviewOut.from_model(review).model_dump(mode="json"),
    }
