"""Patients API endpoints.

GET /api/patients - Patient table
GET /api/patients/{patient_id} - Patient with session history
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rehab_portal.aggregation.sessions import sort_by_started_desc
from rehab_portal.api.app import get_backend_client, require_clinician
from rehab_portal.backend.client import BackendClient
from rehab_portal.models.types import CamelModel, Patient, SessionQuery, SessionRecord

router = APIRouter(dependencies=[Depends(require_clinician)])


class PatientRow(CamelModel):
    """Patient table row."""

    id: str
    display_name: str
    display_email: str | None
    diagnosis: str | None
    created_at: str | None


class PatientDetail(CamelModel):
    """Patient page payload."""

    patient: Patient
    display_name: str
    display_email: str | None
    sessions: list[SessionRecord]


def _to_row(patient: Patient) -> PatientRow:
    return PatientRow(
        id=patient.id,
        display_name=patient.display_name,
        display_email=patient.display_email,
        diagnosis=patient.diagnosis,
        created_at=patient.created_at,
    )


@router.get("/patients", response_model=list[PatientRow])
def list_patients(client: BackendClient = Depends(get_backend_client)) -> list[PatientRow]:
    return [_to_row(p) for p in client.get_patients()]


@router.get("/patients/{patient_id}", response_model=PatientDetail)
def get_patient(
    patient_id: str,
    client: BackendClient = Depends(get_backend_client),
) -> PatientDetail:
    """Get a patient and their sessions, newest first.

    Args:
        patient_id: Patient ID to fetch.
        client: Backend client (injected).

    Returns:
        PatientDetail with display fields and sorted sessions.
    """
    patient = client.get_patient(patient_id)
    sessions = client.get_sessions(SessionQuery(patient_id=patient_id))

    return PatientDetail(
        patient=patient,
        display_name=patient.display_name,
        display_email=patient.display_email,
        sessions=sort_by_started_desc(sessions),
    )
