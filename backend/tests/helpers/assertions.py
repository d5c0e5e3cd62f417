"""Assertion helper utilities for tests."""

from __future__ import annotations


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``.

    Raises
    ------
    AssertionError
        If any required key is missing.
    """

    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_pagination(obj: dict) -> None:
    """Validate a paginated list response (``data`` + ``meta``)."""

    assert_json_keys(obj, {"data", "meta"})
    assert isinstance(obj["data"], list)
    assert_json_keys(obj["meta"], {"total", "page", "per_page", "total_pages"})


def assert_problem(resp, status: int, code: str) -> dict:
    """Assert an RFC 7807 error response and return its JSON body."""

    assert resp.status_code == status, resp.get_data(as_text=True)
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert_json_keys(body, {"type", "title", "status", "detail", "code", "request_id"})
    assert body["status"] == status
    assert body["code"] == code
    return body
