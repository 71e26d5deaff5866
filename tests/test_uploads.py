"""
Upload intake: MIME allow-list, PDF-by-name fallback, size limit.
"""
import io

import pytest
from starlette.datastructures import Headers, UploadFile

from hiring_api.config import settings
from hiring_api.errors import PayloadTooLarge, UploadRejected
from hiring_api.uploads import DOCUMENT_TYPES, IMAGE_TYPES, read_upload, read_uploads


def upload(filename, content_type, data=b"data"):
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


def test_missing_file_is_none():
    assert read_upload(None, DOCUMENT_TYPES) is None
    assert read_upload(upload("", "application/pdf"), DOCUMENT_TYPES) is None


def test_allowed_type_is_buffered():
    incoming = read_upload(upload("cv.docx", DOCUMENT_TYPES[2], b"doc"), DOCUMENT_TYPES)
    assert incoming.filename == "cv.docx"
    assert incoming.content == b"doc"


def test_pdf_accepted_by_extension():
    incoming = read_upload(upload("CV.PDF", "application/octet-stream"), DOCUMENT_TYPES)
    assert incoming is not None


def test_wrong_type_is_rejected():
    with pytest.raises(UploadRejected) as exc:
        read_upload(upload("cv.exe", "application/x-msdownload"), DOCUMENT_TYPES)
    assert exc.value.status_code == 400


def test_image_fields_reject_documents():
    with pytest.raises(UploadRejected):
        read_upload(upload("a.docx", DOCUMENT_TYPES[2]), IMAGE_TYPES)


def test_size_limit():
    limit = 1024 * 1024
    assert read_upload(upload("cv.pdf", "application/pdf", b"x" * limit), DOCUMENT_TYPES, max_bytes=limit)
    with pytest.raises(PayloadTooLarge) as exc:
        read_upload(upload("cv.pdf", "application/pdf", b"x" * (limit + 1)), DOCUMENT_TYPES, max_bytes=limit)
    assert exc.value.status_code == 413
    assert exc.value.message == "File is too large. Maximum size is 1MB."


def test_read_uploads_skips_empty_entries():
    files = read_uploads([upload("a.png", "image/png"), upload("", "image/png")], IMAGE_TYPES)
    assert [f.filename for f in files] == ["a.png"]
    assert read_uploads(None, IMAGE_TYPES) == []


class TestThroughTheApi:
    FORM = {"full_name": "Jane", "email": "jane@example.com", "phone": "1"}

    def test_oversized_cv_is_413(self, client, store, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 2 * 1024 * 1024)
        resp = client.post(
            "/applications/apply-general",
            data=self.FORM,
            files={"cv": ("cv.pdf", b"x" * (2 * 1024 * 1024 + 1), "application/pdf")},
        )
        assert resp.status_code == 413
        assert resp.json() == {"success": False, "message": "File is too large. Maximum size is 2MB."}
        assert store.uploads == []

    def test_bad_type_is_400(self, client, store):
        resp = client.post(
            "/applications/apply-general", data=self.FORM, files={"cv": ("cv.exe", b"MZ", "application/x-msdownload")}
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "invalid extension"
        assert store.uploads == []

    def test_octet_stream_pdf_is_accepted(self, client, store):
        resp = client.post(
            "/applications/apply-general", data=self.FORM, files={"cv": ("cv.pdf", b"%PDF", "application/octet-stream")}
        )
        assert resp.status_code == 201
        assert len(store.uploads) == 1

    def test_store_outage_is_502(self, client, store):
        store.fail_upload = True
        resp = client.post(
            "/applications/apply-general", data=self.FORM, files={"cv": ("cv.pdf", b"%PDF", "application/pdf")}
        )
        assert resp.status_code == 502
        assert resp.json()["success"] is False
