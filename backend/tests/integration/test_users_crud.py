"""End-to-end user CRUD through the Flask test client."""

import uuid

import pytest

from tests.helpers.assertions import assert_json_keys, assert_pagination, assert_problem
from tests.helpers.http import USERS_URL, build_url, json_headers, user_url
from userhub.repositories.user import UserRepository
from userhub.services._shared.errors import StoreError

pytestmark = pytest.mark.integration


def _create(client, name="John Doe", email="john@example.com"):
    resp = client.post(USERS_URL, json={"name": name, "email": email}, headers=json_headers())
    assert resp.status_code == 201, resp.get_data(as_text=True)
    return resp.get_json()["data"]


class TestUsersCrudFlow:
    def test_full_lifecycle(self, client):
        resp = client.post(
            USERS_URL,
            json={"name": "John Doe", "email": "john@example.com"},
            headers=json_headers(),
        )
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["message"] == "User created successfully"
        created = body["data"]
        assert_json_keys(created, {"id", "name", "email", "created_at", "updated_at"})
        user_id = created["id"]

        resp = client.get(user_url(user_id))
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "User retrieved successfully"
        assert resp.get_json()["data"]["email"] == "john@example.com"

        resp = client.put(user_url(user_id), json={"name": "Jane Doe"}, headers=json_headers())
        assert resp.status_code == 200
        updated = resp.get_json()
        assert updated["message"] == "User updated successfully"
        assert updated["data"]["name"] == "Jane Doe"
        assert updated["data"]["email"] == "john@example.com"

        resp = client.delete(user_url(user_id))
        assert resp.status_code == 200
        assert resp.get_json() == {"message": "User deleted successfully"}

        assert_problem(client.get(user_url(user_id)), 404, "user_not_found")
        assert_problem(client.delete(user_url(user_id)), 404, "user_not_found")

        listing = client.get(USERS_URL).get_json()
        assert listing["meta"]["total"] == 0

    def test_timestamps_identical_across_reads(self, client):
        created = _create(client)

        fetched = client.get(user_url(created["id"])).get_json()["data"]
        listed = client.get(USERS_URL).get_json()["data"][0]

        for field in ("created_at", "updated_at"):
            assert fetched[field] == created[field]
            assert listed[field] == created[field]
        assert created["created_at"].endswith("+00:00")

    def test_update_keeps_created_at_format(self, client):
        created = _create(client)

        resp = client.put(
            user_url(created["id"]), json={"name": "Jane Doe"}, headers=json_headers()
        )
        updated = resp.get_json()["data"]

        assert updated["created_at"] == created["created_at"]
        assert updated["updated_at"].endswith("+00:00")

    def test_patch_behaves_like_put(self, client):
        user = _create(client)
        resp = client.patch(
            user_url(user["id"]), json={"email": "new@example.com"}, headers=json_headers()
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["email"] == "new@example.com"
        assert resp.get_json()["data"]["name"] == "John Doe"

    def test_null_fields_are_left_unchanged(self, client):
        user = _create(client)
        resp = client.put(
            user_url(user["id"]), json={"name": None, "email": None}, headers=json_headers()
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "John Doe"

    def test_email_reusable_after_delete(self, client):
        first = _create(client)
        client.delete(user_url(first["id"]))

        second = _create(client)
        assert second["id"] != first["id"]

    def test_ada_bea_scenario(self, client):
        ada = _create(client, name="Ada", email="ada@x.com")

        resp = client.post(
            USERS_URL, json={"name": "Bea", "email": "ada@x.com"}, headers=json_headers()
        )
        assert_problem(resp, 409, "user_exists")

        resp = client.put(user_url(ada["id"]), json={"email": "bea@x.com"}, headers=json_headers())
        assert resp.status_code == 200
        assert resp.get_json()["data"]["id"] == ada["id"]

        assert client.delete(user_url(ada["id"])).status_code == 200
        assert_problem(client.get(user_url(ada["id"])), 404, "user_not_found")


class TestUsersValidation:
    def test_duplicate_email_conflict(self, client):
        _create(client)
        resp = client.post(
            USERS_URL, json={"name": "Other", "email": "john@example.com"}, headers=json_headers()
        )
        body = assert_problem(resp, 409, "user_exists")
        assert body["detail"] == "User with this email already exists"

    def test_update_to_taken_email_conflict(self, client):
        _create(client, email="taken@example.com")
        target = _create(client, name="Target", email="target@example.com")

        resp = client.put(
            user_url(target["id"]), json={"email": "taken@example.com"}, headers=json_headers()
        )
        assert_problem(resp, 409, "user_exists")
        assert client.get(user_url(target["id"])).get_json()["data"]["email"] == "target@example.com"

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "J", "email": "john@example.com"},
            {"name": "John", "email": "not-an-email"},
            {"email": "john@example.com"},
            {"name": "John", "email": "john@example.com", "role": "admin"},
        ],
    )
    def test_invalid_create_payload(self, client, payload):
        body = assert_problem(
            client.post(USERS_URL, json=payload, headers=json_headers()), 400, "validation_error"
        )
        assert "errors" in body["details"]

    def test_non_json_body(self, client):
        resp = client.post(USERS_URL, data="name=John", content_type="text/plain")
        assert_problem(resp, 400, "validation_error")

    def test_json_array_body(self, client):
        resp = client.post(USERS_URL, json=[{"name": "John"}], headers=json_headers())
        assert_problem(resp, 400, "validation_error")

    def test_invalid_update_payload(self, client):
        user = _create(client)
        resp = client.put(user_url(user["id"]), json={"name": ""}, headers=json_headers())
        assert_problem(resp, 400, "validation_error")

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_invalid_id(self, client, method):
        resp = getattr(client, method)(user_url("not-a-uuid"), json={}, headers=json_headers())
        body = assert_problem(resp, 400, "invalid_id")
        assert body["detail"] == "Invalid user ID format"

    def test_unknown_id(self, client):
        assert_problem(client.get(user_url(uuid.uuid4())), 404, "user_not_found")
        resp = client.put(user_url(uuid.uuid4()), json={"name": "Ghost"}, headers=json_headers())
        assert_problem(resp, 404, "user_not_found")


class TestUsersListing:
    def test_pagination(self, client):
        for i in range(25):
            _create(client, name=f"User {i:02d}", email=f"user{i}@example.com")

        first = client.get(build_url(USERS_URL, page=1, per_page=10)).get_json()
        assert_pagination(first)
        assert len(first["data"]) == 10
        assert set(first) == {"data", "meta"}
        assert first["meta"] == {"total": 25, "page": 1, "per_page": 10, "total_pages": 3}
        assert first["data"][0]["name"] == "User 00"

        last = client.get(build_url(USERS_URL, page=3, per_page=10)).get_json()
        assert len(last["data"]) == 5
        assert last["data"][-1]["name"] == "User 24"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ({"page": 0, "per_page": 0}, (1, 10)),
            ({"page": "abc"}, (1, 10)),
            ({"per_page": 1000}, (1, 10)),
            ({"per_page": 100}, (1, 100)),
        ],
    )
    def test_out_of_range_query_falls_back(self, client, query, expected):
        meta = client.get(build_url(USERS_URL, **query)).get_json()["meta"]
        assert (meta["page"], meta["per_page"]) == expected

    def test_configured_max_per_page(self, app, client, monkeypatch):
        monkeypatch.setitem(app.config, "MAX_PER_PAGE", 200)

        meta = client.get(build_url(USERS_URL, per_page=150)).get_json()["meta"]
        assert meta["per_page"] == 150
        meta = client.get(build_url(USERS_URL, per_page=201)).get_json()["meta"]
        assert meta["per_page"] == 10

    def test_empty(self, client):
        body = client.get(USERS_URL).get_json()
        assert body["data"] == []
        assert body["meta"]["total_pages"] == 0

    def test_store_failure_is_internal_error(self, client, monkeypatch):
        def _boom(self, *, page, per_page):
            raise StoreError("select users", RuntimeError("disk unavailable"))

        monkeypatch.setattr(UserRepository, "get_all", _boom)
        body = assert_problem(client.get(USERS_URL), 500, "internal_error")
        assert body["detail"] == "Storage operation failed"


class TestRequestCorrelation:
    def test_request_id_is_echoed(self, client):
        resp = client.get(USERS_URL, headers=json_headers(request_id="req-123"))
        assert resp.headers["X-Request-ID"] == "req-123"

    def test_request_id_in_problem_body(self, client):
        resp = client.get(user_url("bad"), headers=json_headers(request_id="req-456"))
        assert assert_problem(resp, 400, "invalid_id")["request_id"] == "req-456"

    def test_request_id_generated(self, client):
        first = client.get(USERS_URL).headers["X-Request-ID"]
        second = client.get(USERS_URL).headers["X-Request-ID"]
        assert first and second and first != second

    def test_unknown_route(self, client):
        assert_problem(client.get("/api/v1/nope"), 404, "not_found")

    def test_method_not_allowed(self, client):
        assert_problem(client.delete(USERS_URL), 405, "method_not_allowed")
