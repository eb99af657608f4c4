#!/usr/bin/env python3
"""Print per-exercise statistics from a sessions JSON export.

The export is the JSON array returned by the backend's GET /sessions.

Usage:
    python scripts/exercise_report.py sessions.json

Exit codes:
    0: Report printed
    1: File missing or not a JSON array of sessions
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pydantic import TypeAdapter, ValidationError  # noqa: E402

from rehab_portal.aggregation.charts import format_duration, global_average_rom  # noqa: E402
from rehab_portal.aggregation.exercise_stats import compute_exercise_statistics  # noqa: E402
from rehab_portal.models.types import SessionRecord  # noqa: E402


def _fmt_deg(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1f} deg"


def load_sessions(path: Path) -> list[SessionRecord] | None:
    """Load and validate a sessions export."""
    if not path.exists():
        print(f"FAIL: File not found: {path}")
        return None
    try:
        raw = json.loads(path.read_text())
        return TypeAdapter(list[SessionRecord]).validate_python(raw)
    except json.JSONDecodeError as e:
        print(f"FAIL: Invalid JSON in {path}: {e}")
    except ValidationError as e:
        print(f"FAIL: Not a list of sessions: {e.error_count()} validation errors")
    return None


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(__doc__)
        return 1

    sessions = load_sessions(Path(args[0]))
    if sessions is None:
        return 1

    stats = compute_exercise_statistics(sessions)

    print("=" * 72)
    print(f"{len(sessions)} sessions across {len(stats)} exercises")
    print(f"Global average ROM: {_fmt_deg(global_average_rom(stats))}")
    print("=" * 72)
    print(f"{'Exercise':<24}{'Count':>7}{'Avg ROM':>10}{'Max ROM':>10}{'Avg time':>10}{'Total':>11}")
    for s in stats:
        avg_duration = "n/a" if s.avg_duration is None else format_duration(s.avg_duration)
        print(
            f"{s.label[:23]:<24}{s.count:>7}{_fmt_deg(s.avg_rom):>10}{_fmt_deg(s.max_rom):>10}"
            f"{avg_duration:>10}{format_duration(s.total_duration):>11}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
