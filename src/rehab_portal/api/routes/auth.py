"""Auth API endpoints.

POST /api/auth/login - Exchange credentials for a backend token
GET /api/auth/profile - Current user
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehab_portal.api.app import get_backend_client
from rehab_portal.backend.client import BackendClient
from rehab_portal.models.types import AuthUser, LoginCredentials, LoginResponse

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
def login(
    credentials: LoginCredentials,
    client: BackendClient = Depends(get_backend_client),
) -> LoginResponse:
    """Log in against the backend.

    The UI keeps the returned token and sends it as a bearer header.
    """
    return client.login(credentials)


@router.get("/auth/profile", response_model=AuthUser)
def profile(client: BackendClient = Depends(get_backend_client)) -> AuthUser:
    return client.get_profile()
