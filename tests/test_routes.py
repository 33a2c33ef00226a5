import datetime

import pytest
from sqlalchemy.exc import OperationalError

from userapi.routes import user_routes


def create(client, **payload):
    return client.post("/users", json=payload)


def parse_timestamp(value):
    assert value.endswith("Z")
    return datetime.datetime.fromisoformat(value[:-1])


def test_create_user_normalizes_fields(client):
    r = create(client, name="john doe", email="JOHN@EX.com", age=30)

    assert r.status_code == 201
    body = r.get_json()
    assert body["name"] == "John Doe"
    assert body["email"] == "john@ex.com"
    assert body["age"] == 30
    assert isinstance(body["id"], int)
    assert parse_timestamp(body["createdAt"]) == parse_timestamp(body["updatedAt"])


def test_create_user_age_out_of_range(client):
    r = create(client, name="Ann", email="ann@example.com", age=200)

    assert r.status_code == 400
    assert r.get_json() == {"error": "Age must be between 0 and 150"}


def test_create_user_without_json_body(client):
    r = client.post("/users", data="name=ann", content_type="application/x-www-form-urlencoded")

    assert r.status_code == 400
    assert r.get_json() == {"error": "Request body must be a JSON object"}


def test_duplicate_email_case_and_whitespace_insensitive(client):
    assert create(client, name="Ann", email="ann@example.com").status_code == 201

    r = create(client, name="Ann Two", email="  ANN@Example.COM ")
    assert r.status_code == 400
    assert r.get_json() == {"error": "Email already exists"}


def test_list_users_newest_first(client):
    for i in range(3):
        create(client, name=f"user {i}", email=f"u{i}@example.com")

    r = client.get("/users")

    assert r.status_code == 200
    body = r.get_json()
    assert [u["email"] for u in body] == ["u2@example.com", "u1@example.com", "u0@example.com"]
    stamps = [parse_timestamp(u["createdAt"]) for u in body]
    assert stamps == sorted(stamps, reverse=True)


def test_list_users_empty(client):
    r = client.get("/users")
    assert r.status_code == 200
    assert r.get_json() == []


def test_get_user(client):
    user = create(client, name="Ann", email="ann@example.com").get_json()

    r = client.get(f"/users/{user['id']}")

    assert r.status_code == 200
    assert r.get_json() == user


@pytest.mark.parametrize("raw_id", ["abc", "0", "-1", "1.5", "1e3", "2147483648", "99999999999999999999"])
def test_invalid_id_is_rejected(client, raw_id):
    for method in (client.get, client.delete):
        r = method(f"/users/{raw_id}")
        assert r.status_code == 400
        assert r.get_json() == {"error": "Invalid user ID"}

    r = client.put(f"/users/{raw_id}", json={"age": 3})
    assert r.status_code == 400


def test_largest_valid_id_is_looked_up(client):
    r = client.get("/users/2147483647")
    assert r.status_code == 404
    assert r.get_json() == {"error": "User not found"}


def test_get_missing_user(client):
    r = client.get("/users/999")
    assert r.status_code == 404
    assert r.get_json() == {"error": "User not found"}


def test_partial_update_keeps_other_fields(client):
    user = create(client, name="Ann Lee", email="ann@example.com", age=30).get_json()

    r = client.put(f"/users/{user['id']}", json={"age": 31})

    assert r.status_code == 200
    body = r.get_json()
    assert body["age"] == 31
    assert body["name"] == user["name"]
    assert body["email"] == user["email"]
    assert body["createdAt"] == user["createdAt"]
    assert parse_timestamp(body["updatedAt"]) >= parse_timestamp(user["updatedAt"])
    assert parse_timestamp(body["updatedAt"]) >= parse_timestamp(body["createdAt"])


def test_update_normalizes_and_validates(client):
    user = create(client, name="Ann", email="ann@example.com").get_json()

    r = client.put(f"/users/{user['id']}", json={"name": "  ann   marie  "})
    assert r.get_json()["name"] == "Ann Marie"

    r = client.put(f"/users/{user['id']}", json={"email": "broken"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Invalid email address"}


def test_update_to_existing_email(client):
    create(client, name="Ann", email="ann@example.com")
    bob = create(client, name="Bob", email="bob@example.com").get_json()

    r = client.put(f"/users/{bob['id']}", json={"email": "ANN@example.com"})

    assert r.status_code == 400
    assert r.get_json() == {"error": "Email already exists"}


def test_update_missing_user(client):
    r = client.put("/users/999", json={"age": 5})
    assert r.status_code == 404


def test_delete_then_get(client):
    user = create(client, name="Ann", email="ann@example.com").get_json()

    r = client.delete(f"/users/{user['id']}")
    assert r.status_code == 204
    assert r.data == b""

    assert client.get(f"/users/{user['id']}").status_code == 404


def test_delete_missing_user(client):
    r = client.delete("/users/999")
    assert r.status_code == 404
    assert r.get_json() == {"error": "User not found"}


def test_storage_error_maps_to_500(client, monkeypatch):
    def broken_get_all(self):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(user_routes.UserRepository, "get_all", broken_get_all)

    r = client.get("/users")
    assert r.status_code == 500
    assert r.get_json() == {"error": "Failed to fetch users"}


def test_unknown_route(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.get_json() == {"error": "Endpoint not found"}


def test_method_not_allowed(client):
    r = client.patch("/users")
    assert r.status_code == 405
    assert r.get_json() == {"error": "Method not allowed"}


def test_uncaught_exception_is_500(client, monkeypatch):
    def explode(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(user_routes.UserService, "get_all_users", explode)

    r = client.get("/users")
    assert r.status_code == 500
    assert r.get_json() == {"error": "Internal server error"}


def test_security_headers(client):
    r = client.get("/users")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.content_type == "application/json"

    missing = client.get("/users/999")
    assert missing.status_code == 404
    assert missing.headers["X-Frame-Options"] == "DENY"


def test_index(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.get_json()["endpoints"] == {"users": "/users", "health": "/health"}


def test_health(client, app):
    r = client.get("/health")

    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["environment"] == app.config["ENVIRONMENT"]
    parse_timestamp(body["timestamp"])


def test_health_reports_disconnected(client, database, monkeypatch):
    monkeypatch.setattr(database, "ping", lambda: False)

    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json()["database"] == "disconnected"


def test_health_unexpected_failure(client, database, monkeypatch):
    def explode():
        raise RuntimeError("pool exhausted")

    monkeypatch.setattr(database, "ping", explode)

    r = client.get("/health")
    assert r.status_code == 500
    assert r.get_json() == {"status": "error", "database": "error", "error": "pool exhausted"}
