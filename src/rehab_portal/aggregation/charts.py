"""Chart-data adapters.

Reshape backend dictionaries and session lists into arrays of points
for bar, line and pie charts.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable, Mapping

from rehab_portal.catalog.exercises import get_exercise_label
from rehab_portal.models.domain import LabelResolver
from rehab_portal.models.types import (
    DayCount,
    ExerciseStatistics,
    KeyValueNumber,
    NamedValue,
    PatientFrequencyPoint,
    RomByExerciseRow,
    RomStats,
    SessionRecord,
)

NO_PHASE_LABEL = "No phase"
UNKNOWN_PATIENT_LABEL = "Unknown patient"
TOP_PATIENTS_LIMIT = 8


def map_record_to_array(record: Mapping[str, float]) -> list[KeyValueNumber]:
    """Convert ``{"Phase 1": 10}`` into ``[KeyValueNumber(key="Phase 1", value=10)]``.

    Order follows the mapping.
    """
    return [KeyValueNumber(key=key, value=value) for key, value in record.items()]


def named_counts(record: Mapping[str, float] | None) -> list[NamedValue]:
    """Convert a count mapping into pie-chart slices."""
    if not record:
        return []
    return [NamedValue(name=name, value=value) for name, value in record.items()]


def rom_by_exercise_rows(
    rom_by_exercise: Mapping[str, RomStats],
    label_resolver: LabelResolver = get_exercise_label,
) -> list[RomByExerciseRow]:
    """Flatten per-exercise RomStats into bar-chart rows.

    A missing session count is reported as 0.
    """
    return [
        RomByExerciseRow(
            exercise_id=exercise_id,
            label=label_resolver(exercise_id) or exercise_id,
            avg_rom=stats.avg,
            min_rom=stats.min,
            max_rom=stats.max,
            count=stats.count or 0,
        )
        for exercise_id, stats in rom_by_exercise.items()
    ]


def _date_sort_key(value: str) -> tuple[int, str]:
    """Sort key for YYYY-MM-DD strings; unparseable dates go last."""
    try:
        return (0, date.fromisoformat(value[:10]).isoformat())
    except ValueError:
        return (1, value)


def sessions_per_day_series(record: Mapping[str, int]) -> list[DayCount]:
    """Convert ``{date: count}`` into a chronologically sorted series."""
    return [
        DayCount(date=day, count=count)
        for day, count in sorted(record.items(), key=lambda item: _date_sort_key(item[0]))
    ]


def sort_frequency_by_day(points: Iterable[PatientFrequencyPoint]) -> list[PatientFrequencyPoint]:
    """Return a chronologically sorted copy of frequency points."""
    return sorted(points, key=lambda p: _date_sort_key(p.date))


def phase_counts(sessions: Iterable[SessionRecord]) -> list[NamedValue]:
    """Count sessions per rehabilitation phase, largest first."""
    counts = Counter(s.phase_label or NO_PHASE_LABEL for s in sessions)
    return [NamedValue(name=name, value=value) for name, value in counts.most_common()]


def patient_counts(
    sessions: Iterable[SessionRecord],
    limit: int = TOP_PATIENTS_LIMIT,
) -> list[NamedValue]:
    """Count sessions per patient name and keep the top ``limit``.

    Sessions without an expanded patient are skipped.
    """
    counts: Counter[str] = Counter()
    for session in sessions:
        patient = session.patient
        if patient is None:
            continue
        counts[patient.full_name or patient.name or UNKNOWN_PATIENT_LABEL] += 1
    return [NamedValue(name=name, value=value) for name, value in counts.most_common(limit)]


def global_average_rom(stats: Iterable[ExerciseStatistics]) -> float | None:
    """Mean of the per-exercise average ROM values that are present."""
    values = [s.avg_rom for s in stats if s.avg_rom is not None]
    if not values:
        return None
    return sum(values) / len(values)


def format_duration(seconds: float) -> str:
    """Format seconds as minutes from one minute up, else whole seconds."""
    if seconds >= 60:
        return f"{seconds / 60:.1f} min"
    return f"{seconds:.0f} s"
