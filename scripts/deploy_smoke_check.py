"""Post-deploy smoke checks executed from the app container."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from uuid import uuid4

BASE_URL = "http://localhost:8000"
API_PREFIX = "/api/v1"


def request(
    path: str,
    *,
    method: str = "GET",
    body: dict | None = None,
    headers: dict[str, str] | None = None,
    expected: int = 200,
) -> bytes:
    payload = None
    req_headers = {"Accept": "application/json"}
    if headers:
        req_headers.update(headers)
    if body is not None:
        payload = json.dumps(body).encode("utf-8")
        req_headers["Content-Type"] = "application/json"

    request_obj = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=payload,
        method=method,
        headers=req_headers,
    )
    try:
        with urllib.request.urlopen(request_obj, timeout=30) as response:
            content = response.read()
            status = response.getcode()
    except urllib.error.HTTPError as exc:  # pragma: no cover - runtime smoke script
        body_text = exc.read().decode("utf-8", errors="ignore")
        raise RuntimeError(f"{method} {path} -> {exc.code}: {body_text}") from exc

    if status != expected:
        raise RuntimeError(f"{method} {path} -> {status}, expected {expected}")
    return content


def _register_and_login(role: str) -> tuple[str, dict[str, str]]:
    email = f"deploy-smoke-{role}-{uuid4().hex[:10]}@codeconnect.dev"
    password = "StrongPass123!"

    user = json.loads(
        request(
            f"{API_PREFIX}/identity/auth/register",
            method="POST",
            body={"email": email, "first_name": f"Smoke {role}", "password": password, "role": role},
            expected=201,
        ),
    )
    token = json.loads(
        request(
            f"{API_PREFIX}/identity/auth/login",
            method="POST",
            body={"email": email, "password": password},
        ),
    )["access_token"]
    return user["id"], {"Authorization": f"Bearer {token}"}


def main() -> None:
    for endpoint in ["/health", "/ready", "/docs", "/metrics"]:
        request(endpoint, expected=200)

    mentor_id, mentor_headers = _register_and_login("mentor")
    request(f"{API_PREFIX}/identity/users/me", headers=mentor_headers)
    request(
        f"{API_PREFIX}/mentors/profiles",
        method="POST",
        headers=mentor_headers,
        body={"user_id": mentor_id, "title": "Smoke Mentor"},
        expected=201,
    )

    slot = json.loads(
        request(
            f"{API_PREFIX}/schedule",
            method="POST",
            headers=mentor_headers,
            body={"day_of_week": "Monday", "start_time": "10:00", "end_time": "11:00"},
            expected=201,
        ),
    )
    request(f"{API_PREFIX}/schedule?mentor_id={mentor_id}")
    request(f"{API_PREFIX}/schedule/mentors/{mentor_id}/available-times")
    request(f"{API_PREFIX}/schedule/{slot['id']}", method="DELETE", headers=mentor_headers)

    print("Smoke checks passed.")


if __name__ == "__main__":
    main()
