"""FastAPI application factory.

The portal API sits between the UI and the backend REST API:
- Forwards the caller's bearer token to the backend
- Shapes backend records into view payloads
"""

from __future__ import annotations

import logging
from typing import Generator

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rehab_portal.backend.client import ApiError, BackendClient
from rehab_portal.config import Settings, load_settings
from rehab_portal.models.types import AuthUser

logger = logging.getLogger(__name__)

# Roles allowed to use the clinical views
CLINICAL_ROLES = ("CLINICIAN", "ADMIN")


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend_client(
    settings: Settings = Depends(get_settings),
    authorization: str | None = Header(default=None),
) -> Generator[BackendClient, None, None]:
    """Dependency to get a backend client for the caller.

    Yields:
        Client carrying the caller's bearer token, closed after the request.
    """
    client = BackendClient(
        base_url=settings.api_base_url,
        token=bearer_token(authorization),
        timeout=settings.http_timeout,
    )
    try:
        yield client
    finally:
        client.close()


def require_clinician(client: BackendClient = Depends(get_backend_client)) -> AuthUser:
    """Dependency that admits only clinicians and admins.

    Raises:
        HTTPException: 401 without a token, 403 for other roles.
    """
    if not client.token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = client.get_profile()
    if user.role not in CLINICAL_ROLES:
        logger.warning(f"User {user.id} with role {user.role} rejected from clinical views")
        raise HTTPException(status_code=403, detail="Role not allowed")
    return user


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional settings; read from the environment when omitted.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Rehab Portal API",
        description="Clinical views over rehabilitation sensor sessions",
        version="0.1.0",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def backend_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        """Relay backend failures; 502 when the backend was unreachable."""
        return JSONResponse(status_code=exc.status or 502, content={"detail": exc.message})

    # Include routes
    from rehab_portal.api.routes import analysis, auth, dashboard, patients, sessions

    app.include_router(auth.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")
    app.include_router(patients.router, prefix="/api")
    app.include_router(sessions.router, prefix="/api")
    app.include_router(analysis.router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
