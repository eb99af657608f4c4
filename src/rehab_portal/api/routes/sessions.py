"""Sessions API endpoints.

GET /api/sessions - Session table with date and text filters
GET /api/sessions/analytics - Statistics grouped by exercise
GET /api/sessions/{session_id} - Session with comparative analysis
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from rehab_portal.aggregation.charts import global_average_rom, patient_counts, phase_counts
from rehab_portal.aggregation.exercise_stats import compute_exercise_statistics
from rehab_portal.aggregation.sessions import (
    fallback_session_analysis,
    filter_sessions,
    sort_by_started_desc,
)
from rehab_portal.api.app import get_backend_client, require_clinician
from rehab_portal.backend.client import ApiError, BackendClient
from rehab_portal.catalog.exercises import get_exercise
from rehab_portal.models.types import (
    CamelModel,
    ExerciseStatistics,
    NamedValue,
    SessionAnalysis,
    SessionRecord,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_clinician)])


class SessionList(CamelModel):
    """Session table payload."""

    total: int
    sessions: list[SessionRecord]


class ExerciseAnalyticsView(CamelModel):
    """Exercise analytics page payload."""

    total_sessions: int
    exercise_count: int
    top_exercise: ExerciseStatistics | None
    global_avg_rom: float | None
    exercises: list[ExerciseStatistics]
    sessions_by_phase: list[NamedValue]
    top_patients: list[NamedValue]


class SessionDetail(CamelModel):
    """Session page payload."""

    session: SessionRecord
    analysis: SessionAnalysis
    used_fallback: bool
    exercise_label: str | None = None
    exercise_description: str | None = None


@router.get("/sessions", response_model=SessionList)
def list_sessions(
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    search: str | None = None,
    client: BackendClient = Depends(get_backend_client),
) -> SessionList:
    """List sessions newest first, filtered in the portal.

    Args:
        date_from: Inclusive start day (YYYY-MM-DD).
        date_to: Inclusive end day (YYYY-MM-DD).
        search: Free text over exercise, phase, session type and patient.
        client: Backend client (injected).

    Returns:
        SessionList with the unfiltered total and the matching sessions.
    """
    sessions = sort_by_started_desc(client.get_sessions())
    filtered = filter_sessions(sessions, date_from=date_from, date_to=date_to, search=search)
    return SessionList(total=len(sessions), sessions=filtered)


@router.get("/sessions/analytics", response_model=ExerciseAnalyticsView)
def get_sessions_analytics(
    client: BackendClient = Depends(get_backend_client),
) -> ExerciseAnalyticsView:
    """Summarize all sessions by exercise for tables and charts."""
    sessions = client.get_sessions()
    stats = compute_exercise_statistics(sessions)

    return ExerciseAnalyticsView(
        total_sessions=len(sessions),
        exercise_count=len(stats),
        top_exercise=stats[0] if stats else None,
        global_avg_rom=global_average_rom(stats),
        exercises=stats,
        sessions_by_phase=phase_counts(sessions),
        top_patients=patient_counts(sessions),
    )


@router.get("/sessions/{session_id}", response_model=SessionDetail)
def get_session(
    session_id: str,
    client: BackendClient = Depends(get_backend_client),
) -> SessionDetail:
    """Get a session with its comparative analysis.

    Falls back to a placeholder analysis when the backend cannot provide one.
    """
    session = client.get_session(session_id)

    used_fallback = False
    try:
        analysis = client.get_session_analysis(session_id)
    except (ApiError, ValidationError) as e:
        logger.warning(f"Session analysis unavailable for {session_id}, using placeholder: {e}")
        analysis = fallback_session_analysis(session)
        used_fallback = True

    meta = get_exercise(session.exercise_id) if session.exercise_id else None
    return SessionDetail(
        session=session,
        analysis=analysis,
        used_fallback=used_fallback,
        exercise_label=meta.label if meta else session.exercise_id,
        exercise_description=meta.description if meta else None,
    )
