from datetime import datetime, timedelta, timezone

from hiring_api.services import applications as application_service
from hiring_api.services.sweeper import sweep_orphaned_cvs

from conftest import pdf


def test_sweep_removes_only_old_unowned_cvs(session, store):
    kept = application_service.submit_application(session, store, "Jane", "jane@example.com", "1", pdf())
    orphan = store.upload(pdf("lost.pdf"), "test/Careers/CVs/zzzzz")
    fresh = store.upload(pdf("inflight.pdf"), "test/Careers/CVs/yyyyy")
    store.upload(pdf("avatar.png"), "test/User/aaaaa")

    later = datetime.now(timezone.utc) + timedelta(hours=2)
    store.files[fresh.file_id].created_at = later - timedelta(minutes=5)

    removed = sweep_orphaned_cvs(session, store, grace_minutes=60, now=later)

    assert removed == 1
    assert store.deleted == [orphan.file_id]
    assert kept.cv_file_id in store.files


def test_sweep_counts_only_successful_deletes(session, store):
    store.upload(pdf("lost.pdf"), "test/Careers/CVs/zzzzz")
    store.fail_delete = True
    later = datetime.now(timezone.utc) + timedelta(days=1)
    assert sweep_orphaned_cvs(session, store, grace_minutes=60, now=later) == 0
