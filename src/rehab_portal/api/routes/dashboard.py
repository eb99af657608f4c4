"""Dashboard API endpoint.

GET /api/dashboard - Totals and latest sessions
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehab_portal.aggregation.sessions import (
    LATEST_LIMIT,
    RECENT_DAYS,
    count_recent_sessions,
    latest_sessions,
)
from rehab_portal.api.app import get_backend_client, require_clinician
from rehab_portal.backend.client import BackendClient
from rehab_portal.models.types import CamelModel, SessionRecord

router = APIRouter(dependencies=[Depends(require_clinician)])


class DashboardOverview(CamelModel):
    """Headline numbers for the clinical dashboard."""

    total_patients: int
    total_sessions: int
    recent_sessions: int
    recent_window_days: int
    latest_sessions: list[SessionRecord]


@router.get("/dashboard", response_model=DashboardOverview)
def get_dashboard(client: BackendClient = Depends(get_backend_client)) -> DashboardOverview:
    patients = client.get_patients()
    sessions = client.get_sessions()

    return DashboardOverview(
        total_patients=len(patients),
        total_sessions=len(sessions),
        recent_sessions=count_recent_sessions(sessions, days=RECENT_DAYS),
        recent_window_days=RECENT_DAYS,
        latest_sessions=latest_sessions(sessions, limit=LATEST_LIMIT),
    )
