"""Pure record filtering - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Sequence, TypeVar

from .records import Record

R = TypeVar("R", bound=Record)

ALL = "all"

# Fields matched by free-text search, per collection
SEARCH_FIELDS: dict[str, tuple[str, ...]] = {
    "projects": ("title", "company", "description"),
    "tasks": ("title", "description"),
    "sales": ("client_name", "project_name", "business_name"),
    "customers": ("name", "email", "company_name"),
    "notes": ("title", "content"),
    "investments": ("title", "vendor", "category"),
    "design_briefings": ("title", "client_name", "project_type"),
}

# Date each collection is compared on for date-range filters
DATE_FIELDS: dict[str, str] = {
    "projects": "created_at",
    "tasks": "created_at",
    "sales": "created_at",
    "customers": "created_at",
    "notes": "created_at",
    "investments": "created_at",
    "design_briefings": "created_at",
}


def as_date(value) -> date | None:
    """Calendar date of a date or datetime value; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


@dataclass(frozen=True)
class FilterCriteria:
    """Active constraints for one view. Built per render, never persisted."""

    search: str = ""
    search_fields: tuple[str, ...] = ("title",)
    equals: dict[str, str] = field(default_factory=dict)
    tag: str = ""
    date_field: str = "created_at"
    date_from: date | None = None
    date_to: date | None = None

    @classmethod
    def for_collection(cls, collection: str, **kwargs) -> "FilterCriteria":
        """Criteria preset with the collection's search and date fields."""
        kwargs.setdefault("search_fields", SEARCH_FIELDS.get(collection, ("title",)))
        kwargs.setdefault("date_field", DATE_FIELDS.get(collection, "created_at"))
        return cls(**kwargs)

    def active_filter_count(self) -> int:
        """Number of equality constraints that actually constrain."""
        return sum(1 for v in self.equals.values() if v is not None and v != ALL)

    def matches(self, record: Record) -> bool:
        return (
            _matches_search(record, self.search, self.search_fields)
            and _matches_equals(record, self.equals)
            and _matches_tag(record, self.tag)
            and _matches_dates(record, self.date_field, self.date_from, self.date_to)
        )


def _matches_search(record: Record, search: str, search_fields: Iterable[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    for name in search_fields:
        value = getattr(record, name, None)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def _matches_equals(record: Record, equals: dict[str, str]) -> bool:
    for name, expected in equals.items():
        if expected is None or expected == ALL:
            continue
        if not hasattr(record, name) or getattr(record, name) != expected:
            return False
    return True


def _matches_tag(record: Record, tag: str) -> bool:
    if not tag:
        return True
    tags = getattr(record, "tags", None) or getattr(record, "categories", None)
    return bool(tags) and tag in tags


def _matches_dates(
    record: Record,
    date_field: str,
    date_from: date | None,
    date_to: date | None,
) -> bool:
    if date_from is None and date_to is None:
        return True
    value = as_date(getattr(record, date_field, None))
    if value is None:
        return False
    if date_from is not None and value < date_from:
        return False
    if date_to is not None and value > date_to:
        return False
    return True


def filter_records(records: Sequence[R], criteria: FilterCriteria) -> list[R]:
    """
    Records matching every active constraint, in input order.

    Pure function - no I/O.
    """
    return [r for r in records if criteria.matches(r)]


def collect_tags(records: Iterable[Record]) -> list[str]:
    """Every distinct tag across records, in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        for tag in getattr(record, "tags", None) or []:
            seen.setdefault(tag, None)
    return list(seen)
