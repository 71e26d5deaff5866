"""
ImageKit store against a mocked transport.
"""
import json

import httpx
import pytest

from hiring_api.errors import UploadError
from hiring_api.services.attachments import ImageKitStore, project_folder, release

from conftest import FakeStore, pdf

UPLOAD_URL = "https://upload.imagekit.test/api/v1/files/upload"
API_URL = "https://api.imagekit.test/v1"


def make_store(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ImageKitStore("private_key", UPLOAD_URL, API_URL, client=client)


def test_project_folder_prefix():
    assert project_folder("Careers", "CVs", "ab12c") == "test/Careers/CVs/ab12c"


def test_upload_posts_multipart_with_basic_auth():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"url": "https://ik.test/cv.pdf", "fileId": "ik_1"})

    stored = make_store(handler).upload(pdf(), "test/Careers/CVs/ab12c")

    assert stored.url == "https://ik.test/cv.pdf"
    assert stored.file_id == "ik_1"
    assert seen["url"] == UPLOAD_URL
    assert seen["auth"].startswith("Basic ")
    assert b"test/Careers/CVs/ab12c" in seen["body"]
    assert b"%PDF-1.4 test" in seen["body"]


def test_upload_error_status():
    store = make_store(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(UploadError):
        store.upload(pdf(), "test")


def test_upload_without_file_id():
    store = make_store(lambda request: httpx.Response(200, json={"url": "https://ik.test/x"}))
    with pytest.raises(UploadError):
        store.upload(pdf(), "test")


def test_network_failure_becomes_upload_error():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(UploadError):
        make_store(handler).upload(pdf(), "test")


def test_delete_treats_missing_file_as_done():
    calls = []

    def handler(request):
        calls.append((request.method, str(request.url)))
        return httpx.Response(404, json={"message": "not found"})

    make_store(handler).delete("ik_9")
    assert calls == [("DELETE", f"{API_URL}/files/ik_9")]


def test_delete_failure_raises():
    store = make_store(lambda request: httpx.Response(503))
    with pytest.raises(UploadError):
        store.delete("ik_9")


def test_list_files_paginates():
    pages = {
        0: [{"fileId": f"f{i}", "filePath": f"/test/x/f{i}", "createdAt": "2024-05-01T10:00:00.000Z"} for i in range(1000)],
        1000: [{"fileId": "last", "filePath": "/test/x/last"}],
    }

    def handler(request):
        assert request.url.params["path"] == "/test/x"
        return httpx.Response(200, content=json.dumps(pages[int(request.url.params["skip"])]))

    files = make_store(handler).list_files("test/x")
    assert len(files) == 1001
    assert files[0].created_at.year == 2024
    assert files[-1].created_at is None


def test_release_logs_and_swallows_store_errors(caplog):
    store = FakeStore()
    store.fail_delete = True
    assert release(store, "file_1", "application 1") is False
    assert "Could not release attachment file_1" in caplog.text
    assert release(store, None) is False
    assert store.deleted == ["file_1"]
