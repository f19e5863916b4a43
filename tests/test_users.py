from datetime import datetime, timedelta

from app.core.security import verify_password
from app.models import Role, User, Vehicle
from app.models.enums import FuelType, TransmissionType, VehicleType
from app.services import user_service

from conftest import make_user


NEW_USER = {
    "name": "Budi",
    "email": "budi@example.com",
    "password": "s3cret-pass",
    "role": "OWNER",
    "phoneNumber": "+62 812 0000 0000",
    "address": "Jl. Sudirman 1",
}


def stored_user(session_factory, user_id):
    db = session_factory()
    try:
        return db.get(User, user_id)
    finally:
        db.close()


def test_create_user_hides_password(client, admin_headers):
    res = client.post("/api/users", json=NEW_USER, headers=admin_headers)
    assert res.status_code == 201, res.text
    body = res.json()
    assert "password" not in body
    assert body["email"] == NEW_USER["email"]
    assert body["role"] == "OWNER"
    assert body["isVerifiedByAdmin"] is False


def test_create_user_stores_bcrypt_hash(client, admin_headers, session_factory):
    res = client.post("/api/users", json=NEW_USER, headers=admin_headers)
    user = stored_user(session_factory, res.json()["id"])
    assert user.password != NEW_USER["password"]
    assert verify_password(NEW_USER["password"], user.password)


def test_create_user_for_every_role_hides_password(client, owner_headers):
    for index, role in enumerate(["CUSTOMER", "OWNER", "ADMIN"]):
        payload = dict(NEW_USER, email=f"user{index}@example.com", role=role)
        res = client.post("/api/users", json=payload, headers=owner_headers)
        assert res.status_code == 201, res.text
        assert "password" not in res.json()


def test_create_user_requires_email_password_and_role(client, admin_headers):
    for field in ("email", "password", "role"):
        payload = {k: v for k, v in NEW_USER.items() if k != field}
        res = client.post("/api/users", json=payload, headers=admin_headers)
        assert res.status_code == 400, field
        assert res.json()["message"] == "Missing required fields"


def test_create_user_rejects_empty_password(client, admin_headers):
    res = client.post("/api/users", json=dict(NEW_USER, password=""), headers=admin_headers)
    assert res.status_code == 400


def test_duplicate_email_conflicts_and_keeps_one_record(client, admin_headers, session_factory):
    first = client.post("/api/users", json=NEW_USER, headers=admin_headers)
    assert first.status_code == 201
    second = client.post("/api/users", json=dict(NEW_USER, name="Other"), headers=admin_headers)
    assert second.status_code == 409
    assert "already exists" in second.json()["message"]

    db = session_factory()
    try:
        assert db.query(User).filter(User.email == NEW_USER["email"]).count() == 1
    finally:
        db.close()


def test_concurrent_duplicate_email_is_caught_by_unique_constraint(client, admin_headers, session_factory, monkeypatch):
    assert client.post("/api/users", json=NEW_USER, headers=admin_headers).status_code == 201

    # Another request inserted the same email after our lookup
    monkeypatch.setattr(user_service, "_email_taken", lambda db, email: False)
    res = client.post("/api/users", json=dict(NEW_USER, name="Other"), headers=admin_headers)
    assert res.status_code == 409
    assert res.json() == {"message": "User with this email already exists"}

    db = session_factory()
    try:
        assert db.query(User).filter(User.email == NEW_USER["email"]).count() == 1
    finally:
        db.close()


def test_list_users_newest_first_without_passwords(client, admin_headers, session_factory):
    now = datetime.utcnow()
    make_user(session_factory, "old@example.com", Role.CUSTOMER, createdAt=now - timedelta(days=2))
    make_user(session_factory, "new@example.com", Role.CUSTOMER, createdAt=now + timedelta(days=1))

    res = client.get("/api/users", headers=admin_headers)
    assert res.status_code == 200
    users = res.json()
    emails = [u["email"] for u in users]
    assert emails[0] == "new@example.com"
    assert emails[-1] == "old@example.com"
    assert all("password" not in u for u in users)


def test_get_user(client, admin_headers, owner):
    res = client.get(f"/api/users/{owner.id}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["email"] == owner.email
    assert "password" not in res.json()


def test_get_missing_user_is_not_found(client, admin_headers):
    res = client.get("/api/users/does-not-exist", headers=admin_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "User not found"}


def test_update_without_password_keeps_hash(client, admin_headers, owner, session_factory):
    before = stored_user(session_factory, owner.id).password

    res = client.put(
        f"/api/users/{owner.id}",
        json={"name": "Renamed", "isVerifiedByAdmin": True},
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["name"] == "Renamed"
    assert res.json()["isVerifiedByAdmin"] is True
    assert stored_user(session_factory, owner.id).password == before


def test_update_with_empty_password_keeps_hash(client, admin_headers, owner, session_factory):
    before = stored_user(session_factory, owner.id).password
    res = client.put(f"/api/users/{owner.id}", json={"password": ""}, headers=admin_headers)
    assert res.status_code == 200
    assert stored_user(session_factory, owner.id).password == before


def test_update_with_password_rehashes(client, admin_headers, owner, session_factory):
    res = client.put(f"/api/users/{owner.id}", json={"password": "brand-new"}, headers=admin_headers)
    assert res.status_code == 200
    assert "password" not in res.json()

    stored = stored_user(session_factory, owner.id).password
    assert verify_password("brand-new", stored)
    assert not verify_password("password123", stored)


def test_update_role_and_contact_fields(client, admin_headers, customer):
    res = client.put(
        f"/api/users/{customer.id}",
        json={"role": "OWNER", "phoneNumber": "0812", "address": "Bandung"},
        headers=admin_headers,
    )
    body = res.json()
    assert body["role"] == "OWNER"
    assert body["phoneNumber"] == "0812"
    assert body["address"] == "Bandung"
    assert body["email"] == customer.email


def test_update_email_to_taken_address_conflicts(client, admin_headers, owner, customer):
    res = client.put(f"/api/users/{customer.id}", json={"email": owner.email}, headers=admin_headers)
    assert res.status_code == 409


def test_update_missing_user_is_not_found(client, admin_headers):
    res = client.put("/api/users/nope", json={"name": "x"}, headers=admin_headers)
    assert res.status_code == 404


def test_delete_user(client, admin_headers, customer):
    res = client.delete(f"/api/users/{customer.id}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"message": f"User {customer.email} deleted successfully"}

    assert client.get(f"/api/users/{customer.id}", headers=admin_headers).status_code == 404


def test_delete_missing_user_is_not_found(client, admin_headers):
    res = client.delete("/api/users/nope", headers=admin_headers)
    assert res.status_code == 404


def test_delete_user_owning_vehicles_conflicts(client, admin_headers, owner, session_factory):
    db = session_factory()
    try:
        db.add(Vehicle(
            make="Honda", model="Jazz", year=2020, licensePlate="D1111AA",
            rentalRate=40, dailyRate=60, lateFeePerDay=5, type=VehicleType.HATCHBACK,
            capacity=5, transmissionType=TransmissionType.MANUAL, fuelType=FuelType.GASOLINE,
            city="Bandung", ownerId=owner.id,
        ))
        db.commit()
    finally:
        db.close()

    res = client.delete(f"/api/users/{owner.id}", headers=admin_headers)
    assert res.status_code == 409
    assert client.get(f"/api/users/{owner.id}", headers=admin_headers).status_code == 200
