"""HTTP client for the rehabilitation backend API.

Wraps httpx with bearer-token auth, JSON decoding and a single error type.
Returns pydantic models to callers.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from rehab_portal.config import DEFAULT_API_BASE_URL, DEFAULT_HTTP_TIMEOUT
from rehab_portal.models.types import (
    AuthUser,
    GlobalAnalysis,
    LoginCredentials,
    LoginResponse,
    Patient,
    PatientAnalysis,
    SessionAnalysis,
    SessionQuery,
    SessionRecord,
)

logger = logging.getLogger(__name__)

_sessions_adapter = TypeAdapter(list[SessionRecord])
_patients_adapter = TypeAdapter(list[Patient])


class ApiError(Exception):
    """Backend request failure.

    Attributes:
        message: Human-readable description.
        status: HTTP status, or None when the backend was unreachable.
        data: Decoded error payload, if any.
    """

    def __init__(self, message: str, status: int | None = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


def _segment(value: str) -> str:
    """URL-encode one path segment."""
    return quote(value, safe="")


def _error_message(status: int, data: Any) -> str:
    """Pick the backend's own message when it sends one."""
    if isinstance(data, dict):
        detail = data.get("message") or data.get("error")
        if detail:
            return str(detail)
    return f"HTTP error {status}"


class BackendClient:
    """Synchronous client for the backend REST API.

    One instance carries at most one bearer token; build a new client per
    authenticated caller.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        token: str | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend base URL, e.g. http://localhost:3000/api/v1.
            token: Bearer token sent on authenticated requests.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.base_url = base_url
        self.token = token
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> BackendClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = True,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path relative to base_url, or an absolute URL.
            auth: Attach the bearer token when one is set.
            json: Optional JSON body.
            params: Optional query parameters.

        Returns:
            Decoded JSON, or None for non-JSON responses.

        Raises:
            ApiError: On transport failure or non-2xx status.
        """
        headers = {"Accept": "application/json"}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug(f"Backend request: {method} {self.base_url}{path} (auth={auth})")

        try:
            response = self._http.request(method, path, headers=headers, json=json, params=params)
        except httpx.TransportError as e:
            logger.error(f"Backend unreachable at {self.base_url}{path}: {e}")
            raise ApiError(
                "Could not connect to the backend. Check that it is running "
                "and that the API base URL is correct.",
                data={"originalError": str(e)},
            ) from e

        data = None
        if "application/json" in response.headers.get("content-type", ""):
            try:
                data = response.json()
            except ValueError:
                data = None

        if not response.is_success:
            logger.error(f"Backend error response: {path} status={response.status_code} data={data}")
            if response.status_code == 401:
                raise ApiError("Unauthorized", 401, data)
            raise ApiError(_error_message(response.status_code, data), response.status_code, data)

        return data

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, credentials: LoginCredentials) -> LoginResponse:
        """Exchange credentials for a token and remember it on this client."""
        data = self.request("POST", "/auth/login", auth=False, json=credentials.model_dump())
        payload = LoginResponse.model_validate(data)
        self.token = payload.access_token
        logger.debug("Login OK, token stored on client")
        return payload

    def get_profile(self) -> AuthUser:
        return AuthUser.model_validate(self.request("GET", "/auth/profile"))

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def get_sessions(self, query: SessionQuery | None = None) -> list[SessionRecord]:
        params = query.to_params() if query else None
        return _sessions_adapter.validate_python(
            self.request("GET", "/sessions", params=params or None) or []
        )

    def get_session(self, session_id: str) -> SessionRecord:
        return SessionRecord.model_validate(self.request("GET", f"/sessions/{_segment(session_id)}"))

    def get_patients(self) -> list[Patient]:
        return _patients_adapter.validate_python(self.request("GET", "/patients") or [])

    def get_patient(self, patient_id: str) -> Patient:
        return Patient.model_validate(self.request("GET", f"/patients/{_segment(patient_id)}"))

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def get_global_analysis(self) -> GlobalAnalysis:
        return GlobalAnalysis.model_validate(self.request("GET", "/analysis/global"))

    def get_patient_analysis(self, patient_id: str) -> PatientAnalysis:
        """Fetch analytics for one patient.

        Raises:
            ValueError: If patient_id is empty.
            ApiError: On backend failure.
        """
        if not patient_id:
            raise ValueError("get_patient_analysis: patient_id is required")
        return PatientAnalysis.model_validate(
            self.request("GET", f"/analysis/patient/{_segment(patient_id)}")
        )

    def get_session_analysis(self, session_id: str) -> SessionAnalysis:
        """Fetch the comparative analysis of one session.

        Raises:
            ValueError: If session_id is empty.
            ApiError: On backend failure.
        """
        if not session_id:
            raise ValueError("get_session_analysis: session_id is required")
        return SessionAnalysis.model_validate(
            self.request("GET", f"/analysis/session/{_segment(session_id)}")
        )
