"""Per-exercise session statistics.

Groups session records by exercise id and summarizes ROM and duration.
Pure computation - callers fetch the sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rehab_portal.catalog.exercises import get_exercise_label
from rehab_portal.models.domain import LabelResolver
from rehab_portal.models.types import ExerciseStatistics, SessionRecord


@dataclass
class ExerciseAccumulator:
    """Running totals for one exercise group."""

    count: int = 0
    rom_sum: float = 0.0
    rom_count: int = 0
    rom_max: float | None = None
    duration_sum: float = 0.0
    duration_count: int = 0

    def add(self, session: SessionRecord) -> None:
        self.count += 1

        rom = session.rom_max_deg
        if rom is not None:
            self.rom_sum += rom
            self.rom_count += 1
            if self.rom_max is None or rom > self.rom_max:
                self.rom_max = rom

        duration = session.duration_secs
        if duration is not None:
            self.duration_sum += duration
            self.duration_count += 1


def compute_exercise_statistics(
    sessions: Iterable[SessionRecord],
    label_resolver: LabelResolver = get_exercise_label,
) -> list[ExerciseStatistics]:
    """Compute one statistics summary per exercise id.

    Records without an exercise id are skipped. ROM and duration averages
    only consider records where the value is present; the two fields are
    independent of each other. Groups are returned by session count,
    highest first, ties in the order their ids were first seen.

    Args:
        sessions: Session records, possibly empty. Not mutated.
        label_resolver: Maps exercise id to display label. Exceptions it
            raises propagate to the caller.

    Returns:
        List of ExerciseStatistics sorted by count descending.
    """
    # dicts keep first-seen key order, which drives the tie-break below
    groups: dict[str, ExerciseAccumulator] = {}
    for session in sessions:
        exercise_id = session.exercise_id
        if not exercise_id:
            continue
        if exercise_id not in groups:
            groups[exercise_id] = ExerciseAccumulator()
        groups[exercise_id].add(session)

    stats = [
        _finalize(exercise_id, acc, label_resolver) for exercise_id, acc in groups.items()
    ]

    # sorted() is stable, so equal counts keep first-seen order
    return sorted(stats, key=lambda s: s.count, reverse=True)


def _finalize(
    exercise_id: str,
    acc: ExerciseAccumulator,
    label_resolver: LabelResolver,
) -> ExerciseStatistics:
    """Turn an accumulator into its output summary."""
    label = label_resolver(exercise_id) or exercise_id

    avg_rom = acc.rom_sum / acc.rom_count if acc.rom_count else None
    avg_duration = acc.duration_sum / acc.duration_count if acc.duration_count else None

    return ExerciseStatistics(
        exercise_id=exercise_id,
        label=label,
        count=acc.count,
        avg_rom=avg_rom,
        max_rom=acc.rom_max,
        avg_duration=avg_duration,
        total_duration=acc.duration_sum,
    )
