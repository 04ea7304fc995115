"""Pure month-grid layout for the task calendar - no I/O dependencies."""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from .filters import as_date
from .records import Record

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY


@dataclass
class CalendarDay:
    """One date of the month with the records that fall on it."""

    date: date
    records: list[Record] = field(default_factory=list)

    def is_today(self, today: date) -> bool:
        return self.date == today


@dataclass
class MonthGrid:
    """A month laid out for rendering: blank cells, then every day."""

    year: int
    month: int
    leading_blanks: int
    days: list[CalendarDay]

    def weeks(self) -> list[list[CalendarDay | None]]:
        """Rows of seven cells, padded with None before day 1 and after the last day."""
        cells: list[CalendarDay | None] = [None] * self.leading_blanks + list(self.days)
        cells += [None] * (-len(cells) % 7)
        return [cells[i : i + 7] for i in range(0, len(cells), 7)]

    def day(self, day_of_month: int) -> CalendarDay:
        return self.days[day_of_month - 1]


def build_month_grid(
    year: int,
    month: int,
    records: Iterable[Record],
    date_field: str = "due_date",
    first_weekday: int = SUNDAY,
) -> MonthGrid:
    """
    Lay out a month (1-12) with records bucketed by calendar date.

    Pure function - no I/O. Records without a usable date are skipped;
    time-of-day is ignored. `first_weekday` uses the `calendar` module's
    numbering (MONDAY=0 ... SUNDAY=6).
    """
    weekday_of_first, days_in_month = calendar.monthrange(year, month)
    leading_blanks = (weekday_of_first - first_weekday) % 7

    days = [CalendarDay(date=date(year, month, d)) for d in range(1, days_in_month + 1)]
    for record in records:
        d = as_date(getattr(record, date_field, None))
        if d is not None and d.year == year and d.month == month:
            days[d.day - 1].records.append(record)

    return MonthGrid(year=year, month=month, leading_blanks=leading_blanks, days=days)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
