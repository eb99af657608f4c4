"""Domain models for the rehab portal.

Pure Python dataclasses for entities that never cross the wire as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

# Maps an exercise id to a display label.
LabelResolver = Callable[[str], str]


# ============================================================================
# Exercise Domain
# ============================================================================


@dataclass(frozen=True)
class ExerciseMeta:
    """Catalog entry for a rehabilitation exercise."""

    id: str
    label: str
    description: str | None = None
    phase_label_defaults: tuple[str, ...] = field(default_factory=tuple)
