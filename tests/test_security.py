from datetime import timedelta

import pytest

from app.core.security import (
    SessionData,
    authorize,
    create_access_token,
    decode_session,
    hash_password,
    verify_password,
)
from app.db.session import get_db
from app.main import app
from app.models import Role
from app.models.enums import STAFF_ROLES


PROTECTED_ENDPOINTS = [
    ("GET", "/api/users"),
    ("POST", "/api/users"),
    ("GET", "/api/users/some-id"),
    ("PUT", "/api/users/some-id"),
    ("DELETE", "/api/users/some-id"),
    ("GET", "/api/vehicles"),
    ("POST", "/api/vehicles"),
    ("GET", "/api/vehicles/some-id"),
    ("PUT", "/api/vehicles/some-id"),
    ("DELETE", "/api/vehicles/some-id"),
]


def test_authorize_requires_a_session():
    assert authorize(None, STAFF_ROLES) is False


@pytest.mark.parametrize("role,allowed", [
    (Role.ADMIN, True),
    (Role.OWNER, True),
    (Role.CUSTOMER, False),
])
def test_authorize_checks_role_membership(role, allowed):
    session = SessionData(id="u1", role=role)
    assert authorize(session, STAFF_ROLES) is allowed


def test_token_round_trip():
    token = create_access_token("u1", Role.OWNER, True)
    session = decode_session(token)
    assert session == SessionData(id="u1", role=Role.OWNER, isVerifiedByAdmin=True)


def test_expired_or_tampered_tokens_have_no_session():
    expired = create_access_token("u1", Role.ADMIN, expires_delta=timedelta(minutes=-5))
    assert decode_session(expired) is None

    token = create_access_token("u1", Role.ADMIN)
    assert decode_session(token[:-4] + "abcd") is None
    assert decode_session("not-a-token") is None


def test_password_hashing_is_salted():
    first = hash_password("hunter2")
    second = hash_password("hunter2")
    assert first != second
    assert verify_password("hunter2", first)
    assert not verify_password("hunter3", first)
    assert not verify_password("hunter2", None)


@pytest.mark.parametrize("method,path", PROTECTED_ENDPOINTS)
def test_missing_session_is_rejected_before_any_store_access(client, storage, method, path):
    opened = []

    def spy_get_db():
        opened.append(True)
        yield None

    app.dependency_overrides[get_db] = spy_get_db

    res = client.request(method, path)
    assert res.status_code == 401
    assert res.json() == {"message": "Unauthorized"}
    assert opened == []
    assert storage.calls == []


@pytest.mark.parametrize("method,path", PROTECTED_ENDPOINTS)
def test_customer_is_rejected_everywhere(client, customer_headers, storage, method, path):
    res = client.request(method, path, headers=customer_headers)
    assert res.status_code == 401
    assert storage.calls == []


@pytest.mark.parametrize("method,path", PROTECTED_ENDPOINTS)
def test_garbage_token_is_rejected(client, method, path):
    res = client.request(method, path, headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
