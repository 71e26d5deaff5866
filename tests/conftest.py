"""
Pytest configuration: in-memory database, recording attachment store,
authenticated clients.
"""
import os
from datetime import datetime, timezone

# required settings must exist before hiring_api.config is imported
os.environ.setdefault("SIGN_IN_TOKEN_SECRET", "test-sign-in-secret-0123456789abcdef")
os.environ.setdefault("RESET_TOKEN_SECRET", "test-reset-secret-0123456789abcdefgh")
os.environ.setdefault("IMAGEKIT_PRIVATE_KEY", "private_test_key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SALT_ROUNDS"] = "4"
os.environ["PROJECT_FOLDER"] = "test"
os.environ["ENABLE_ORPHAN_SWEEP"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from hiring_api.db import create_db_and_tables, get_session
from hiring_api.errors import UploadError
from hiring_api.main import app
from hiring_api.models import Role, User
from hiring_api.schemas import CareerCreate
from hiring_api.security import hash_password
from hiring_api.services import careers as career_service
from hiring_api.services.attachments import AttachmentStore, RemoteFile, StoredFile, get_attachment_store
from hiring_api.uploads import IncomingFile
from hiring_api.utils.ids import short_id

PASSWORD = "secret123"


class FakeStore(AttachmentStore):
    """Records every call; optionally fails deletes or uploads."""

    def __init__(self):
        self.files = {}
        self.uploads = []
        self.deleted = []
        self.fail_delete = False
        self.fail_upload = False
        self.on_upload = None
        self._counter = 0

    def upload(self, file, folder):
        if self.fail_upload:
            raise UploadError("store down")
        self._counter += 1
        file_id = f"file_{self._counter}"
        self.uploads.append((file.filename, folder))
        self.files[file_id] = RemoteFile(
            file_id=file_id,
            file_path=f"/{folder}/{file.filename}",
            created_at=datetime.now(timezone.utc),
        )
        if self.on_upload:
            self.on_upload()
        return StoredFile(url=f"https://files.test/{folder}/{file.filename}", file_id=file_id)

    def delete(self, file_id):
        self.deleted.append(file_id)
        if self.fail_delete:
            raise UploadError("delete failed")
        self.files.pop(file_id, None)

    def list_files(self, folder):
        prefix = f"/{folder.strip('/')}/"
        return [f for f in self.files.values() if f.file_path.startswith(prefix)]


def make_sessionmaker(engine):
    return sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with make_sessionmaker(engine)() as s:
        yield s


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def client(engine, store):
    factory = make_sessionmaker(engine)

    def _get_session():
        with factory() as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_attachment_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def pdf(name="cv.pdf", content=b"%PDF-1.4 test"):
    return IncomingFile(filename=name, content_type="application/pdf", content=content)


def png(name="image.png", content=b"\x89PNG test"):
    return IncomingFile(filename=name, content_type="image/png", content=content)


def career_payload(**overrides) -> dict:
    payload = {
        "title": {"en": "HVAC Technician", "ar": "فني تكييف"},
        "department": {"en": "Engineering", "ar": "الهندسة"},
        "location": {"en": "Riyadh", "ar": "الرياض"},
        "employment_type": {"en": "Full-Time", "ar": "دوام كامل"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_career(session):
    def _make(**overrides):
        return career_service.create_career(session, CareerCreate(**career_payload(**overrides)))

    return _make


@pytest.fixture
def make_user(session):
    def _make(email="staff@example.com", role=Role.HR, is_active=True, password=PASSWORD):
        user = User(
            user_name=email.split("@")[0],
            email=email,
            hashed_password=hash_password(password),
            role=role,
            is_active=is_active,
            custom_id=short_id(),
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


def login(client, email, password=PASSWORD) -> dict:
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def staff_headers(client, make_user):
    make_user("hr@example.com", role=Role.HR)
    return login(client, "hr@example.com")


@pytest.fixture
def admin_headers(client, make_user):
    make_user("admin@example.com", role=Role.ADMIN)
    return login(client, "admin@example.com")


@pytest.fixture
def user_headers(client, make_user):
    make_user("plain@example.com", role=Role.USER)
    return login(client, "plain@example.com")
