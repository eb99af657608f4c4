"""Analysis API endpoints.

GET /api/analysis/global - Chart-ready global analytics
GET /api/analysis/patient/{patient_id} - Chart-ready patient analytics
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehab_portal.aggregation.charts import (
    map_record_to_array,
    named_counts,
    rom_by_exercise_rows,
    sessions_per_day_series,
    sort_frequency_by_day,
)
from rehab_portal.api.app import get_backend_client, require_clinician
from rehab_portal.backend.client import BackendClient
from rehab_portal.models.types import (
    CamelModel,
    DayCount,
    DurationStats,
    KeyValueNumber,
    NamedValue,
    PatientFrequencyPoint,
    PatientRomTrendPoint,
    RomByExerciseRow,
)

router = APIRouter(dependencies=[Depends(require_clinician)])


class GlobalAnalysisView(CamelModel):
    """Global analysis page payload."""

    total_patients: int
    total_sessions: int
    exercise_count: int
    rom_by_exercise: list[RomByExerciseRow]
    sessions_per_day: list[DayCount]
    sessions_by_phase: list[KeyValueNumber]
    sessions_by_type: list[NamedValue]


class PatientAnalysisView(CamelModel):
    """Patient analysis page payload."""

    patient_id: str
    display_name: str
    total_sessions: int
    avg_rom: float | None
    rom_trend: list[PatientRomTrendPoint]
    rom_by_exercise: list[RomByExerciseRow]
    duration_stats: DurationStats | None
    frequency_by_day: list[PatientFrequencyPoint]
    sessions_by_phase: list[KeyValueNumber]
    sessions_by_type: list[KeyValueNumber]


@router.get("/analysis/global", response_model=GlobalAnalysisView)
def get_global_analysis(client: BackendClient = Depends(get_backend_client)) -> GlobalAnalysisView:
    data = client.get_global_analysis()

    return GlobalAnalysisView(
        total_patients=data.total_patients,
        total_sessions=data.total_sessions,
        exercise_count=len(data.rom_by_exercise),
        rom_by_exercise=rom_by_exercise_rows(data.rom_by_exercise),
        sessions_per_day=sessions_per_day_series(data.sessions_per_day),
        sessions_by_phase=map_record_to_array(data.sessions_by_phase),
        sessions_by_type=named_counts(data.sessions_by_type),
    )


@router.get("/analysis/patient/{patient_id}", response_model=PatientAnalysisView)
def get_patient_analysis(
    patient_id: str,
    client: BackendClient = Depends(get_backend_client),
) -> PatientAnalysisView:
    """Get chart-ready analytics for one patient.

    Args:
        patient_id: Patient ID to analyze.
        client: Backend client (injected).

    Returns:
        PatientAnalysisView with sorted series and flattened ROM rows.
    """
    patient = client.get_patient(patient_id)
    analysis = client.get_patient_analysis(patient_id)

    return PatientAnalysisView(
        patient_id=analysis.patient_id,
        display_name=patient.display_name,
        total_sessions=analysis.total_sessions,
        avg_rom=analysis.avg_rom,
        rom_trend=analysis.rom_trend,
        rom_by_exercise=rom_by_exercise_rows(analysis.rom_by_exercise),
        duration_stats=analysis.session_duration_stats,
        frequency_by_day=sort_frequency_by_day(analysis.frequency_by_day),
        sessions_by_phase=map_record_to_array(analysis.sessions_by_phase),
        sessions_by_type=map_record_to_array(analysis.sessions_by_type or {}),
    )
