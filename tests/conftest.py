import os
import tempfile

# Point the app at throwaway resources before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="fleet-media-")
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, hash_password
from app.db.session import Base, get_db
from app.main import app
from app.models import Role, User
from app.services.storage import ObjectStorage, StorageError, get_storage


class InMemoryStorage(ObjectStorage):
    """Records every call and keeps objects in a dict."""

    def __init__(self, bucket: str = "vehicle-images"):
        super().__init__(bucket)
        self.objects = {}
        self.calls = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, path, data, content_type=None):
        self.calls.append(("upload", path))
        if self.fail_upload:
            raise StorageError("upload refused")
        self.objects[path] = data
        return f"https://storage.test/{self.bucket}/{path}"

    def delete(self, path):
        self.calls.append(("delete", path))
        if self.fail_delete:
            raise StorageError("delete refused")
        if path not in self.objects:
            raise StorageError(f"no such object: {path}")
        del self.objects[path]


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(session_factory, email, role, password="password123", **fields):
    db = session_factory()
    try:
        user = User(
            email=email,
            password=hash_password(password) if password else None,
            role=role,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    finally:
        db.close()


def auth_headers(user) -> dict:
    token = create_access_token(user.id, user.role, user.isVerifiedByAdmin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(session_factory):
    return make_user(session_factory, "admin@example.com", Role.ADMIN, name="Admin", isVerifiedByAdmin=True)


@pytest.fixture
def owner(session_factory):
    return make_user(session_factory, "owner@example.com", Role.OWNER, name="Owner")


@pytest.fixture
def customer(session_factory):
    return make_user(session_factory, "customer@example.com", Role.CUSTOMER, name="Customer")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)
