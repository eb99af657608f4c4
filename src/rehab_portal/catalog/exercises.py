"""Exercise catalog and label lookup."""

from __future__ import annotations

from typing import Iterable

from rehab_portal.models.domain import ExerciseMeta, LabelResolver

EXERCISES_CATALOG: tuple[ExerciseMeta, ...] = (
    ExerciseMeta(
        id="heel_slide",
        label="Heel Slide",
        description="Assisted heel slide in knee flexion-extension.",
        phase_label_defaults=("Phase 1 - Early mobility",),
    ),
    ExerciseMeta(
        id="mini_squat_0_45",
        label="Mini Squat 0-45°",
        description="Mini squat limited to a 0-45° range.",
        phase_label_defaults=("Phase 2 - Functional mobility",),
    ),
    ExerciseMeta(
        id="towel_extension",
        label="Towel Extension",
        description="Towel-assisted knee extension.",
    ),
)


def make_label_resolver(catalog: Iterable[ExerciseMeta]) -> LabelResolver:
    """Build a label resolver over a catalog.

    The resolver is total: unknown ids resolve to themselves.

    Args:
        catalog: Exercise entries to index by id.

    Returns:
        Function mapping exercise id to display label.
    """
    labels = {meta.id: meta.label for meta in catalog}

    def resolve(exercise_id: str) -> str:
        return labels.get(exercise_id, exercise_id)

    return resolve


def get_exercise(exercise_id: str) -> ExerciseMeta | None:
    """Look up a catalog entry by id."""
    for meta in EXERCISES_CATALOG:
        if meta.id == exercise_id:
            return meta
    return None


get_exercise_label: LabelResolver = make_label_resolver(EXERCISES_CATALOG)
