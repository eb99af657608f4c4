"""Pydantic models for the rehab portal.

Backend payloads use camelCase keys on the wire; the models expose
snake_case attributes and serialize back to camelCase.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UserRole = Literal["PATIENT", "CLINICIAN", "ADMIN"]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Auth
# ============================================================================


class AuthUser(CamelModel):
    """Authenticated portal user as returned by the backend."""

    id: str
    email: str
    role: UserRole
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


class LoginCredentials(BaseModel):
    """Login form payload."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Backend login response (token key is snake_case on the wire)."""

    access_token: str
    user: AuthUser


# ============================================================================
# Patients and sessions
# ============================================================================


class PatientUserLike(CamelModel):
    """User relation embedded in a patient payload."""

    id: str | None = None
    name: str | None = None
    email: str | None = None
    role: str | None = None
    created_at: str | None = None


class Patient(CamelModel):
    """Patient as returned by the backend.

    The backend may send a flat user (name/email) or a patient entity with a
    nested ``user``; both shapes are accepted.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    full_name: str | None = None
    name: str | None = None
    email: str | None = None
    user_id: str | None = None
    user: PatientUserLike | None = None
    phone: str | None = None
    date_of_birth: str | None = None
    diagnosis: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        """Name to show in tables."""
        user = self.user
        return (
            self.full_name
            or self.name
            or (user.name if user else None)
            or self.email
            or (user.email if user else None)
            or "Unnamed patient"
        )

    @property
    def display_email(self) -> str | None:
        """Primary email, if any."""
        return self.email or (self.user.email if self.user else None)


class SessionRecord(CamelModel):
    """One logged exercise session.

    Measurement fields are optional; absence is never coerced to zero.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    patient_id: str | None = None
    patient: Patient | None = None
    started_at: str | None = None  # ISO string
    ended_at: str | None = None
    duration_secs: float | None = None
    rom_max_deg: float | None = None
    notes: str | None = None
    exercise_id: str | None = None  # "heel_slide", "mini_squat_0_45", ...
    phase_label: str | None = None
    session_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class SessionQuery(BaseModel):
    """Filters accepted by the backend ``/sessions`` endpoint."""

    patient_id: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    exercise_id: str | None = None
    phase_label: str | None = None
    limit: int | None = None

    def to_params(self) -> dict[str, str]:
        """Build query params, omitting unset filters."""
        params: dict[str, str] = {}
        if self.patient_id:
            params["patientId"] = self.patient_id
        if self.date_from:
            params["from"] = self.date_from
        if self.date_to:
            params["to"] = self.date_to
        if self.exercise_id:
            params["exerciseId"] = self.exercise_id
        if self.phase_label:
            params["phaseLabel"] = self.phase_label
        if self.limit is not None:
            params["limit"] = str(self.limit)
        return params


# ============================================================================
# Backend analytics
# ============================================================================


class RomStats(CamelModel):
    """ROM statistics in degrees."""

    avg: float
    min: float
    max: float
    count: int | None = None


class DurationStats(CamelModel):
    """Duration statistics in seconds."""

    avg: float
    min: float
    max: float
    total: float | None = None


class GlobalAnalysis(CamelModel):
    """Analytics over the whole backend database."""

    total_patients: int
    total_sessions: int
    rom_by_exercise: dict[str, RomStats] = Field(default_factory=dict)  # exerciseId -> stats
    sessions_per_day: dict[str, int] = Field(default_factory=dict)  # YYYY-MM-DD -> count
    sessions_by_phase: dict[str, int] = Field(default_factory=dict)
    sessions_by_type: dict[str, int] | None = None
    sessions_by_exercise_and_phase: dict[str, dict[str, int]] | None = None


class PatientRomTrendPoint(CamelModel):
    date: str
    rom: float
    session_id: str | None = None


class PatientFrequencyPoint(CamelModel):
    date: str  # YYYY-MM-DD
    sessions_count: int


class PatientAnalysis(CamelModel):
    """Analytics for a single patient."""

    patient_id: str
    total_sessions: int
    avg_rom: float | None
    rom_by_exercise: dict[str, RomStats] = Field(default_factory=dict)
    rom_trend: list[PatientRomTrendPoint] = Field(default_factory=list)
    session_duration_stats: DurationStats | None = None
    frequency_by_day: list[PatientFrequencyPoint] = Field(default_factory=list)
    sessions_by_phase: dict[str, int] = Field(default_factory=dict)
    sessions_by_type: dict[str, int] | None = None


class SessionAnalysis(CamelModel):
    """Comparison of one session against patient and global references."""

    session_id: str
    patient_id: str
    exercise_id: str
    rom: float
    duration_secs: float
    percentile_patient_exercise: float  # 0-100
    percentile_global_exercise: float  # 0-100
    above_patient_avg: bool
    above_global_avg: bool
    patient_exercise_avg_rom: float | None
    global_exercise_avg_rom: float | None
    clinical_flags: list[str] | None = None


# ============================================================================
# Chart and table payloads
# ============================================================================


class KeyValueNumber(CamelModel):
    key: str
    value: int | float


class NamedValue(CamelModel):
    name: str
    value: int | float


class DayCount(CamelModel):
    date: str
    count: int


class RomByExerciseRow(CamelModel):
    """Flattened RomStats row for bar charts."""

    exercise_id: str
    label: str
    avg_rom: float
    min_rom: float
    max_rom: float
    count: int


class ExerciseStatistics(CamelModel):
    """Statistics summary for one exercise id."""

    exercise_id: str
    label: str
    count: int
    avg_rom: float | None
    max_rom: float | None
    avg_duration: float | None
    total_duration: float
