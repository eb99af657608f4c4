"""Session list helpers for tables.

Filtering, recency and placeholder analysis for session views.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable

from rehab_portal.models.types import SessionAnalysis, SessionRecord

RECENT_DAYS = 7
LATEST_LIMIT = 5

SIMULATED_ANALYSIS_FLAG = (
    "Simulated analysis: the backend did not return /analysis/session/:id, "
    "comparisons are placeholders."
)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp into an aware datetime.

    Naive values are taken as UTC. Returns None when missing or invalid.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_day(value: str | None) -> datetime | None:
    """Parse a YYYY-MM-DD bound as UTC midnight."""
    if not value:
        return None
    try:
        day = date.fromisoformat(value[:10])
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _matches_search(session: SessionRecord, term: str) -> bool:
    patient = session.patient
    patient_name = (patient.full_name or patient.name or "") if patient else ""
    haystacks = (
        session.exercise_id or "",
        session.phase_label or "",
        session.session_type or "",
        patient_name,
    )
    return any(term in h.lower() for h in haystacks)


def filter_sessions(
    sessions: Iterable[SessionRecord],
    date_from: str | None = None,
    date_to: str | None = None,
    search: str | None = None,
) -> list[SessionRecord]:
    """Filter sessions by start date range and free-text search.

    Args:
        sessions: Sessions to filter.
        date_from: Inclusive lower bound (YYYY-MM-DD). Ignored if invalid.
        date_to: Inclusive upper bound; covers the whole day. Ignored if invalid.
        search: Case-insensitive term matched against exercise id, phase,
            session type and patient name. Blank matches everything.

    Returns:
        Sessions that pass every active filter, in input order.
    """
    lower = _parse_day(date_from)
    upper = _parse_day(date_to)
    if upper is not None:
        upper += timedelta(days=1)
    term = (search or "").strip().lower()

    result: list[SessionRecord] = []
    for session in sessions:
        if lower is not None or upper is not None:
            started = parse_timestamp(session.started_at)
            if started is None:
                continue
            if lower is not None and started < lower:
                continue
            if upper is not None and started >= upper:
                continue
        if term and not _matches_search(session, term):
            continue
        result.append(session)
    return result


def sort_by_started_desc(sessions: Iterable[SessionRecord]) -> list[SessionRecord]:
    """Newest sessions first; sessions without a valid start go last."""
    dated: list[tuple[datetime, SessionRecord]] = []
    undated: list[SessionRecord] = []
    for session in sessions:
        started = parse_timestamp(session.started_at)
        if started is None:
            undated.append(session)
        else:
            dated.append((started, session))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [session for _, session in dated] + undated


def latest_sessions(
    sessions: Iterable[SessionRecord], limit: int = LATEST_LIMIT
) -> list[SessionRecord]:
    return sort_by_started_desc(sessions)[:limit]


def count_recent_sessions(
    sessions: Iterable[SessionRecord],
    days: int = RECENT_DAYS,
    now: datetime | None = None,
) -> int:
    """Count sessions started within the last ``days`` days."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=days)

    count = 0
    for session in sessions:
        started = parse_timestamp(session.started_at)
        if started is not None and started >= cutoff:
            count += 1
    return count


def fallback_session_analysis(session: SessionRecord) -> SessionAnalysis:
    """Build a placeholder analysis when the backend has none.

    ROM and duration come from the record (0 when missing); comparisons are
    neutral and a clinical flag marks the result as simulated.
    """
    rom = session.rom_max_deg if session.rom_max_deg is not None else 0.0
    duration = session.duration_secs if session.duration_secs is not None else 0.0

    return SessionAnalysis(
        session_id=session.id or "",
        patient_id=session.patient_id or "",
        exercise_id=session.exercise_id or "",
        rom=rom,
        duration_secs=duration,
        percentile_patient_exercise=50,
        percentile_global_exercise=50,
        above_patient_avg=False,
        above_global_avg=False,
        patient_exercise_avg_rom=rom,
        global_exercise_avg_rom=rom,
        clinical_flags=[SIMULATED_ANALYSIS_FLAG],
    )
