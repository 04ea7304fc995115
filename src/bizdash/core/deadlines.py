"""Pure deadline classification and alerts - no I/O dependencies."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from .records import Project, Task

DUE_SOON_DAYS = 2


class Urgency(Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    ON_TRACK = "on_track"
    NONE = "none"


def _as_datetime(value) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    return None


def _match_zone(value: datetime, ref: datetime) -> datetime:
    """Give value the same naive/aware kind as ref so the two compare."""
    if value.tzinfo is None and ref.tzinfo is not None:
        return value.replace(tzinfo=ref.tzinfo)
    if value.tzinfo is not None and ref.tzinfo is None:
        return value.replace(tzinfo=None)
    return value


def days_until(due: date | datetime | None, now: date | datetime) -> int | None:
    """Whole days until due, rounded up; negative once the moment has passed."""
    due_dt = _as_datetime(due)
    now_dt = _as_datetime(now)
    if due_dt is None or now_dt is None:
        return None
    due_dt = _match_zone(due_dt, now_dt)
    return math.ceil((due_dt - now_dt) / timedelta(days=1))


def classify_deadline(
    due: date | datetime | None,
    now: date | datetime,
    due_soon_days: int = DUE_SOON_DAYS,
) -> Urgency:
    """
    Urgency bucket for a due date.

    Pure, total function: anything that is not a date classifies as NONE.
    """
    diff = days_until(due, now)
    if diff is None:
        return Urgency.NONE
    if diff < 0:
        return Urgency.OVERDUE
    if diff <= due_soon_days:
        return Urgency.DUE_SOON
    return Urgency.ON_TRACK


@dataclass(frozen=True)
class DeadlineAlert:
    """A task or project that is overdue or about to be."""

    kind: str
    id: str
    title: str
    due: datetime
    priority: str
    overdue: bool


def upcoming_deadlines(
    tasks: Iterable[Task],
    projects: Iterable[Project],
    now: datetime,
    window_days: int = 3,
    limit: int | None = 4,
) -> list[DeadlineAlert]:
    """
    Open tasks and projects due within the window (overdue included), soonest first.

    Pure function - no I/O.
    """
    horizon = now + timedelta(days=window_days)
    alerts = []

    candidates = [("task", t) for t in tasks] + [("project", p) for p in projects]
    for kind, record in candidates:
        if record.status == "completed":
            continue
        due = _as_datetime(record.due_date)
        if due is None:
            continue
        due = _match_zone(due, now)
        if due > horizon:
            continue
        alerts.append(
            DeadlineAlert(
                kind=kind,
                id=record.id,
                title=record.title,
                due=due,
                priority=record.priority or "medium",
                overdue=due < now,
            )
        )

    alerts.sort(key=lambda a: a.due)
    return alerts if limit is None else alerts[:limit]
