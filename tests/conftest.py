import os
import uuid

# Settings are read at import time by app.database / app.main.
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.auth import get_current_user
from app.database import get_session
from app.main import app
from app.models.user import Profile, User

STORAGE_PREFIX = "https://example.supabase.co/storage/v1/object/public/nfc-designs/"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def user(session) -> User:
    user = User(id=uuid.uuid4(), email="ada@example.com", role="user")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin(session) -> User:
    admin = User(id=uuid.uuid4(), email="ops@example.com", role="admin")
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


@pytest.fixture
def profile(session, user) -> Profile:
    profile = Profile(user_id=user.id, username="ada", title="Engineer")
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def auth_as(session):
    """
    Switch the request user: auth_as(user), auth_as(None) for a guest.
    """

    def _set(u: User | None):
        snapshot = None if u is None else User(id=u.id, email=u.email, role=u.role)
        app.dependency_overrides[get_current_user] = lambda: snapshot

    return _set


@pytest.fixture
def client(session, user, auth_as):
    def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    auth_as(user)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def fake_storage(monkeypatch):
    """
    Replace Supabase Storage with an in-memory record of calls.
    """
    calls = {"uploaded": [], "deleted": []}

    def _upload(path, file_bytes, content_type=None):
        calls["uploaded"].append(path)
        return STORAGE_PREFIX + path

    def _delete(url):
        calls["deleted"].append(url)
        return True

    monkeypatch.setattr("app.services.workspace_service.upload_to_storage", _upload)
    monkeypatch.setattr("app.services.workspace_service.delete_public_url", _delete)
    return calls


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def _send(**kwargs):
        sent.append(kwargs)

    monkeypatch.setattr("app.services.order_service.send_order_status_email", _send)
    return sent
