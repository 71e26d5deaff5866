# 🔹 FILE: hiring_api/services/catalog.py
# ==============================================================
# Service Catalog Manager
# - sections: create (optionally with first items) / list / get /
#             update header / toggle / delete
# - items:    add / update / delete, `order` unique (≥ 1) per section
# - reviews:  add + running average rating
#
# Every section write goes through _commit_section(): the mutation
# is applied to a fresh read and committed only if the section's
# `version` still matches (compare-and-set). One retry on a stale
# version, then ConflictError. Order checks always run before any
# upload; they run again inside the guarded write. A replaced
# image is released only after the write that drops it commits.
# ==============================================================
import logging
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Review, ServiceItem, ServiceSection, utcnow
from ..schemas import ReviewIn, SectionHeaderIn, SectionHeaderPatch, ServiceItemIn, ServiceItemPatch
from ..uploads import IncomingFile
from ..utils.ids import parse_ids, short_id
from .attachments import AttachmentStore, StoredFile, project_folder, release

logger = logging.getLogger(__name__)

SERVICES_FOLDER = "Services"
HEADER_FIELDS = ("title", "sub_title", "description")
ITEM_FIELDS = ("title", "category", "description")
MAX_WRITE_ATTEMPTS = 2


# ----------------------- helpers -----------------------------

def _section_query(populate: bool = False):
    stmt = select(ServiceSection).options(
        selectinload(ServiceSection.items),
        selectinload(ServiceSection.reviews),
    )
    if populate:
        stmt = stmt.execution_options(populate_existing=True)
    return stmt


def _load_section(session: Session, section_id: int, fresh: bool = False) -> ServiceSection:
    section = session.exec(_section_query(populate=fresh).where(ServiceSection.id == section_id)).first()
    if not section:
        raise NotFoundError("Service section not found")
    return section


def _find_item(section: ServiceSection, item_id: int) -> ServiceItem:
    for item in section.items:
        if item.id == item_id:
            return item
    raise NotFoundError("Service item not found")


def check_order(section: ServiceSection, order: int, exclude_item_id: Optional[int] = None) -> None:
    if order < 1:
        raise ValidationError("Order must be at least 1")
    for item in section.items:
        if item.order == order and item.id != exclude_item_id:
            raise ConflictError(f"Order number {order} is already taken by another service in this section")


def _claim_version(session: Session, section: ServiceSection) -> bool:
    """Bump the version if nobody wrote since we read; False otherwise."""
    result = session.exec(
        update(ServiceSection)
        .where(ServiceSection.id == section.id, ServiceSection.version == section.version)
        .values(version=ServiceSection.version + 1, updated_at=utcnow())
    )
    return result.rowcount == 1


def _commit_section(
    session: Session,
    section_id: int,
    mutate: Callable[[ServiceSection], Any],
) -> Tuple[ServiceSection, Any]:
    for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
        section = _load_section(session, section_id, fresh=True)
        result = mutate(section)
        if not _claim_version(session, section):
            session.rollback()
            logger.info("Section %s changed underneath us (attempt %d)", section_id, attempt)
            continue
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("Order number is already taken by another service in this section")
        # reload so items come back sorted by order
        return _load_section(session, section_id, fresh=True), result
    raise ConflictError("Service section was modified concurrently, please retry")


def _upload(store: AttachmentStore, file: Optional[IncomingFile], *folder: str) -> Optional[StoredFile]:
    if file is None:
        return None
    return store.upload(file, project_folder(SERVICES_FOLDER, *folder))


def _release_section_files(store: AttachmentStore, section: ServiceSection) -> None:
    owner = f"service section {section.id}"
    release(store, section.image_file_id, owner)
    for item in section.items:
        release(store, item.image_file_id, owner)
    for review in section.reviews:
        for shot in review.screenshots or []:
            release(store, shot.get("file_id"), owner)


def _check_payload_orders(items: List[ServiceItemIn]) -> None:
    seen = set()
    for position, payload in enumerate(items, start=1):
        if payload.order < 1:
            raise ValidationError(f"Order must be at least 1. Invalid order for service #{position}")
        if payload.order in seen:
            raise ValidationError(f"Duplicate order number {payload.order} in the request payload")
        seen.add(payload.order)


def _new_item(payload: ServiceItemIn, stored: StoredFile, custom_id: str) -> ServiceItem:
    item = ServiceItem(order=payload.order, custom_id=custom_id, image_url=stored.url, image_file_id=stored.file_id)
    for name in ITEM_FIELDS:
        value = getattr(payload, name)
        setattr(item, f"{name}_en", value.en)
        setattr(item, f"{name}_ar", value.ar)
    return item


def _upload_items(
    store: AttachmentStore, items: List[ServiceItemIn], images: List[IncomingFile]
) -> List[Tuple[str, StoredFile]]:
    uploaded = []
    for _, image in zip(items, images):
        custom_id = short_id()
        uploaded.append((custom_id, _upload(store, image, custom_id)))
    return uploaded


def _append_items(
    session: Session,
    store: AttachmentStore,
    section_id: int,
    items: List[ServiceItemIn],
    images: List[IncomingFile],
) -> ServiceSection:
    section = _load_section(session, section_id)
    for payload in items:
        check_order(section, payload.order)

    uploaded = _upload_items(store, items, images)

    def mutate(sec: ServiceSection) -> None:
        for payload in items:
            check_order(sec, payload.order)
        for payload, (custom_id, stored) in zip(items, uploaded):
            sec.items.append(_new_item(payload, stored, custom_id))

    try:
        section, _ = _commit_section(session, section_id, mutate)
    except ConflictError:
        for _, stored in uploaded:
            release(store, stored.file_id, f"rejected item of section {section_id}")
        raise
    return section


# ----------------------- sections ----------------------------

def create_section(
    session: Session,
    store: AttachmentStore,
    header: SectionHeaderIn,
    is_active: bool = True,
    image: Optional[IncomingFile] = None,
    items: Optional[List[ServiceItemIn]] = None,
    item_images: Optional[List[IncomingFile]] = None,
) -> ServiceSection:
    """
    Create a section, optionally with its first items (one image each,
    matched by position). Posting items under an existing English title
    appends them to that section instead.
    """
    items, item_images = items or [], item_images or []
    _check_payload_orders(items)
    if len(item_images) < len(items):
        raise ValidationError(f"Image is required for service #{len(item_images) + 1}")

    existing = session.exec(select(ServiceSection.id).where(ServiceSection.title_en == header.title.en)).first()
    if existing is not None:
        if not items:
            raise ConflictError("Service section with this title already exists")
        return _append_items(session, store, existing, items, item_images)

    uploaded = _upload_items(store, items, item_images)
    stored = _upload(store, image, "Headers")
    section = ServiceSection(custom_id=short_id(), is_active=is_active)
    for name in HEADER_FIELDS:
        value = getattr(header, name)
        setattr(section, f"{name}_en", value.en)
        setattr(section, f"{name}_ar", value.ar)
    if stored:
        section.image_url, section.image_file_id = stored.url, stored.file_id
    for payload, (custom_id, stored_item) in zip(items, uploaded):
        section.items.append(_new_item(payload, stored_item, custom_id))

    session.add(section)
    session.commit()
    logger.info("Service section %s created (%s) with %d item(s)", section.id, section.title_en, len(items))
    return _load_section(session, section.id, fresh=True)


def list_sections(session: Session) -> List[ServiceSection]:
    stmt = _section_query().order_by(ServiceSection.created_at.desc(), ServiceSection.id.desc())
    return list(session.exec(stmt).all())


def get_section(session: Session, section_id: int) -> ServiceSection:
    return _load_section(session, section_id)


def update_section(
    session: Session,
    store: AttachmentStore,
    section_id: int,
    header: SectionHeaderPatch,
    is_active: Optional[bool] = None,
    image: Optional[IncomingFile] = None,
) -> ServiceSection:
    _load_section(session, section_id)
    stored = _upload(store, image, "Headers")

    def mutate(sec: ServiceSection) -> Optional[str]:
        for name in HEADER_FIELDS:
            value = getattr(header, name)
            if value is not None:
                setattr(sec, f"{name}_en", value.en)
                setattr(sec, f"{name}_ar", value.ar)
        if is_active is not None:
            sec.is_active = is_active
        if not stored:
            return None
        replaced = sec.image_file_id
        sec.image_url, sec.image_file_id = stored.url, stored.file_id
        return replaced

    try:
        section, replaced = _commit_section(session, section_id, mutate)
    except ConflictError:
        if stored:
            release(store, stored.file_id, f"rejected header of section {section_id}")
        raise
    # the old header stays referenced until the new one is committed
    release(store, replaced, f"service section {section_id}")
    return section


def toggle_section(session: Session, section_id: int) -> ServiceSection:
    def mutate(sec: ServiceSection) -> None:
        sec.is_active = not sec.is_active

    section, _ = _commit_section(session, section_id, mutate)
    return section


def delete_section(session: Session, store: AttachmentStore, section_id: int) -> None:
    section = _load_section(session, section_id)
    _release_section_files(store, section)
    session.delete(section)
    session.commit()
    logger.info("Service section %s deleted", section_id)


def bulk_delete_sections(session: Session, store: AttachmentStore, ids) -> int:
    parsed = parse_ids(ids)
    sections = session.exec(_section_query().where(ServiceSection.id.in_(parsed))).all()
    if not sections:
        raise NotFoundError("No services found for the provided IDs")

    for section in sections:
        _release_section_files(store, section)
        session.delete(section)
    session.commit()
    logger.info("Bulk deleted %d service section(s)", len(sections))
    return len(sections)


# ----------------------- items -------------------------------

def add_item(
    session: Session,
    store: AttachmentStore,
    section_id: int,
    payload: ServiceItemIn,
    image: Optional[IncomingFile],
) -> ServiceSection:
    section = _load_section(session, section_id)
    if image is None:
        raise ValidationError("Image is required for service item")
    check_order(section, payload.order)

    custom_id = short_id()
    stored = _upload(store, image, custom_id)

    def mutate(sec: ServiceSection) -> None:
        check_order(sec, payload.order)
        sec.items.append(_new_item(payload, stored, custom_id))

    try:
        section, _ = _commit_section(session, section_id, mutate)
    except ConflictError:
        # someone took the order while we were uploading
        release(store, stored.file_id, f"rejected item of section {section_id}")
        raise
    return section


def update_item(
    session: Session,
    store: AttachmentStore,
    section_id: int,
    item_id: int,
    patch: ServiceItemPatch,
    image: Optional[IncomingFile] = None,
) -> ServiceSection:
    section = _load_section(session, section_id)
    item = _find_item(section, item_id)
    if patch.order is not None:
        check_order(section, patch.order, exclude_item_id=item.id)

    stored, folder_id = None, item.custom_id
    if image is not None:
        folder_id = item.custom_id or short_id()
        stored = _upload(store, image, folder_id)

    def mutate(sec: ServiceSection) -> Optional[str]:
        target = _find_item(sec, item_id)
        for name in ITEM_FIELDS:
            value = getattr(patch, name)
            if value is not None:
                setattr(target, f"{name}_en", value.en)
                setattr(target, f"{name}_ar", value.ar)
        if patch.order is not None:
            check_order(sec, patch.order, exclude_item_id=target.id)
            target.order = patch.order
        if not stored:
            return None
        replaced = target.image_file_id
        target.custom_id = folder_id
        target.image_url, target.image_file_id = stored.url, stored.file_id
        return replaced

    try:
        section, replaced = _commit_section(session, section_id, mutate)
    except ConflictError:
        if stored:
            release(store, stored.file_id, f"rejected update of item {item_id}")
        raise
    # the old image stays referenced until the new one is committed
    release(store, replaced, f"service item {item_id}")
    return section


def delete_item(session: Session, store: AttachmentStore, section_id: int, item_id: int) -> ServiceSection:
    _find_item(_load_section(session, section_id), item_id)

    def mutate(sec: ServiceSection) -> Optional[str]:
        target = _find_item(sec, item_id)
        sec.items.remove(target)
        return target.image_file_id

    section, image_file_id = _commit_section(session, section_id, mutate)
    release(store, image_file_id, f"service item {item_id}")
    return section


# ----------------------- reviews -----------------------------

def running_average(old_avg: float, old_count: int, new_rating: float) -> float:
    return (old_avg * old_count + new_rating) / (old_count + 1)


def add_review(
    session: Session,
    store: AttachmentStore,
    section_id: int,
    payload: ReviewIn,
    screenshots: Optional[List[IncomingFile]] = None,
) -> Review:
    section = _load_section(session, section_id)
    uploaded = [_upload(store, f, section.custom_id, "Reviews") for f in screenshots or []]

    def mutate(sec: ServiceSection) -> Review:
        count = sec.review_count or 0
        sec.rating_value = running_average(sec.rating_value or 0.0, count, payload.rating)
        sec.review_count = count + 1
        review = Review(
            author_name=payload.author_name,
            rating=payload.rating,
            body=payload.body,
            screenshots=[{"url": s.url, "file_id": s.file_id} for s in uploaded],
        )
        sec.reviews.append(review)
        return review

    _, review = _commit_section(session, section_id, mutate)
    session.refresh(review)
    return review
