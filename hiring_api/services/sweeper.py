# 🔹 FILE: hiring_api/services/sweeper.py
# --------------------------------------------------------------
# Reconciliation sweep for CVs nobody owns.
# A submission uploads its CV before the insert; when the insert
# loses the (email, career) race the blob stays behind. The sweep
# lists the CV folder and deletes every file no Application points
# at, skipping files younger than the grace period since those may
# belong to a submission that is still in flight.
# --------------------------------------------------------------
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlmodel import Session, select

from ..config import settings
from ..db import SessionLocal
from ..errors import UploadError
from ..models import Application
from .applications import CV_FOLDER
from .attachments import AttachmentStore, get_attachment_store, project_folder, release

logger = logging.getLogger(__name__)


def sweep_orphaned_cvs(
    session: Session,
    store: AttachmentStore,
    grace_minutes: int,
    now: Optional[datetime] = None,
) -> int:
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(minutes=grace_minutes)

    files = store.list_files(project_folder(*CV_FOLDER))
    owned = set(session.exec(select(Application.cv_file_id)).all())

    removed = 0
    for remote in files:
        if remote.file_id in owned:
            continue
        if remote.created_at is not None and remote.created_at > cutoff:
            continue
        if release(store, remote.file_id, "orphaned CV"):
            removed += 1

    logger.info("Orphan sweep: %d file(s) listed, %d removed", len(files), removed)
    return removed


def run_orphan_sweep() -> None:
    """Scheduler entry point."""
    with SessionLocal() as session:
        try:
            sweep_orphaned_cvs(session, get_attachment_store(), settings.ORPHAN_SWEEP_GRACE_MINUTES)
        except UploadError as exc:
            logger.warning("Orphan sweep skipped: %s", exc)
