"""Shared pytest fixtures for rehab_portal tests."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi import Header
from fastapi.testclient import TestClient

from rehab_portal.backend.client import BackendClient
from rehab_portal.config import Settings

BASE_URL = "http://backend.test/api/v1"

CLINICIAN = {"id": "u-1", "email": "doc@clinic.test", "role": "CLINICIAN", "fullName": "Dr. Vega"}
PATIENT_USER = {"id": "u-2", "email": "pat@clinic.test", "role": "PATIENT"}


class FakeBackend:
    """In-memory stand-in for the backend REST API.

    Routes map "METHOD /path" (path relative to the API prefix) to a
    (status, body) pair. Requests are recorded for assertions.
    """

    def __init__(self):
        self.routes: dict[str, tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []
        self.unreachable: set[str] = set()

    def add(self, method: str, path: str, body: object, status: int = 200) -> None:
        self.routes[f"{method} {path}"] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        key = f"{request.method} {path}"
        if key in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"No route {key}"})
        status, body = self.routes[key]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body), headers={"content-type": "application/json"})

    def refuse(self, method: str, path: str) -> None:
        """Make a route fail as if the backend were down."""
        self.unreachable.add(f"{method} {path}")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Backend that knows the clinician profile."""
    backend = FakeBackend()
    backend.add("GET", "/auth/profile", CLINICIAN)
    return backend


@pytest.fixture
def backend_client(fake_backend):
    """BackendClient wired to the fake backend with a token."""
    client = BackendClient(base_url=BASE_URL, token="tok-123", transport=fake_backend.transport())
    yield client
    client.close()


@pytest.fixture
def api_client(fake_backend):
    """TestClient for the portal app talking to the fake backend."""
    from rehab_portal.api.app import bearer_token, create_app, get_backend_client

    app = create_app(Settings(api_base_url=BASE_URL))

    def override_get_backend_client(authorization: str | None = Header(default=None)):
        client = BackendClient(
            base_url=BASE_URL,
            token=bearer_token(authorization),
            transport=fake_backend.transport(),
        )
        try:
            yield client
        finally:
            client.close()

    app.dependency_overrides[get_backend_client] = override_get_backend_client
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": "Bearer tok-123"}
