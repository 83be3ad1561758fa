"""Progress and schedule delay computation for TerangaBuild projects.

Both functions are pure: they read project/checklist attributes and return
derived values without persisting anything. Callers store the results.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone
from typing import Any

from terangabuild.config import get_config
from terangabuild.models import ScheduleDelay

_SECONDS_PER_DAY = 86400


def compute_checklist_progress(items: Iterable[Any]) -> int:
    """Percentage of checklist items marked complete.

    Args:
        items: Checklist items (models, dicts or objects with ``is_completed``)

    Returns:
        Integer 0-100, rounded half-up; 0 for an empty checklist
    """
    total = 0
    completed = 0
    for item in items:
        total += 1
        if _get(item, "is_completed"):
            completed += 1

    if total == 0:
        return 0

    # Exact half-up rounding of 100 * completed / total in integer arithmetic
    return (200 * completed + total) // (2 * total)


def compute_schedule_delay(
    project: Any,
    now: datetime | date | None = None,
    tolerance_pct: float | None = None,
) -> ScheduleDelay:
    """Compare actual progress with linear expected progress over the schedule.

    Args:
        project: Project model, dict, or object with start_date/end_date/progress
        now: Reference instant (defaults to current UTC time)
        tolerance_pct: Percentage points of slack before flagging a delay

    Returns:
        ScheduleDelay (all-zero when either schedule date is missing)
    """
    start = _to_datetime(_get(project, "start_date"))
    end = _to_datetime(_get(project, "end_date"))
    if start is None or end is None:
        return ScheduleDelay()

    if tolerance_pct is None:
        tolerance_pct = get_config().schedule.tolerance_pct

    current = _to_datetime(now) if now is not None else datetime.now(timezone.utc)

    total_seconds = (end - start).total_seconds()
    elapsed_seconds = (current - start).total_seconds()

    if total_seconds <= 0:
        # Zero-length window: either not started or entirely elapsed
        time_progress = 100.0 if elapsed_seconds >= 0 else 0.0
    else:
        time_progress = min(100.0, max(0.0, elapsed_seconds / total_seconds * 100))

    actual_progress = _get(project, "progress") or 0
    expected_progress = time_progress
    is_delayed = actual_progress < expected_progress - tolerance_pct

    delay_days = 0
    if is_delayed and total_seconds > 0:
        total_days = total_seconds / _SECONDS_PER_DAY
        shortfall = (expected_progress - actual_progress) / 100
        delay_days = max(0, _round_half_up(shortfall * total_days))

    return ScheduleDelay(
        is_delayed=is_delayed,
        delay_days=delay_days,
        time_progress=time_progress,
    )


def _get(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _to_datetime(value: Any) -> datetime | None:
    """Normalise dates, datetimes and ISO strings to aware UTC datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00")) if "T" in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return None
