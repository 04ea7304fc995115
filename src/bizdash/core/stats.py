"""Pure aggregation over record collections - no I/O dependencies."""

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Sequence

from .filters import as_date
from .records import Investment, Project, Record, Sale, Task, parse_decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class SummaryStats:
    """Derived statistics for a collection. Recomputed, never stored."""

    count: int
    total: Decimal = ZERO
    unique: int = 0
    this_month: Decimal = ZERO


def amount_of(record: Record, amount_field: str) -> Decimal:
    """Numeric field as Decimal; missing or malformed values count as zero."""
    value = parse_decimal(getattr(record, amount_field, None))
    return value if value is not None else ZERO


def sum_amounts(records: Iterable[Record], amount_field: str) -> Decimal:
    return sum((amount_of(r, amount_field) for r in records), ZERO)


def count_unique(records: Iterable[Record], unique_field: str) -> int:
    """Distinct non-empty values of a field."""
    values = set()
    for record in records:
        value = getattr(record, unique_field, None)
        if value is not None and value != "":
            values.add(value)
    return len(values)


def in_month(value, year: int, month: int) -> bool:
    d = as_date(value)
    return d is not None and d.year == year and d.month == month


def summarize(
    records: Sequence[Record],
    amount_field: str | None = None,
    unique_field: str | None = None,
    date_field: str | None = None,
    *,
    now: date | datetime,
) -> SummaryStats:
    """
    Count, exact total, distinct values and current-month subtotal.

    Pure function - no I/O. `now` pins the current month for the subtotal.
    """
    total = sum_amounts(records, amount_field) if amount_field else ZERO
    unique = count_unique(records, unique_field) if unique_field else 0

    this_month = ZERO
    if amount_field and date_field:
        this_month = sum_amounts(
            (r for r in records if in_month(getattr(r, date_field, None), now.year, now.month)),
            amount_field,
        )

    return SummaryStats(count=len(records), total=total, unique=unique, this_month=this_month)


def count_by(records: Iterable[Record], field_name: str) -> dict[str, int]:
    """Occurrences of each value of a field, in first-seen order."""
    counts: dict[str, int] = {}
    for record in records:
        key = getattr(record, field_name, None)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
    return counts


def monthly_totals(
    records: Iterable[Record],
    amount_field: str,
    date_field: str,
) -> list[tuple[date, Decimal]]:
    """Per-month sums keyed by the first day of the month, oldest first."""
    totals: dict[date, Decimal] = {}
    for record in records:
        d = as_date(getattr(record, date_field, None))
        if d is None:
            continue
        key = d.replace(day=1)
        totals[key] = totals.get(key, ZERO) + amount_of(record, amount_field)
    return sorted(totals.items())


def year_by_month(
    records: Iterable[Record],
    amount_field: str,
    date_field: str,
    year: int,
) -> list[Decimal]:
    """Twelve monthly sums (January first) for one year."""
    months = [ZERO] * 12
    for record in records:
        d = as_date(getattr(record, date_field, None))
        if d is not None and d.year == year:
            months[d.month - 1] += amount_of(record, amount_field)
    return months


def top_values(records: Iterable[Record], list_field: str, limit: int = 5) -> list[tuple[str, int]]:
    """Most frequent entries of a list-valued field, e.g. sale categories."""
    counter: Counter[str] = Counter()
    for record in records:
        counter.update(getattr(record, list_field, None) or [])
    return counter.most_common(limit)


# ============== Per-entity statistics ==============


@dataclass(frozen=True)
class SalesStats:
    total_sales: int
    total_value: Decimal
    unique_clients: int
    this_month_value: Decimal


@dataclass(frozen=True)
class InvestmentStats:
    total_investments: int
    total_amount: Decimal
    active_subscriptions: int
    this_month_amount: Decimal
    unique_categories: int


@dataclass(frozen=True)
class DashboardStats:
    total_projects: int
    completed_tasks: int
    active_tasks: int
    total_sales: int


def sales_stats(sales: Sequence[Sale], now: date | datetime) -> SalesStats:
    summary = summarize(sales, "sale_value", "client_name", "sale_date", now=now)
    return SalesStats(
        total_sales=summary.count,
        total_value=summary.total,
        unique_clients=summary.unique,
        this_month_value=summary.this_month,
    )


def investment_stats(investments: Sequence[Investment], now: date | datetime) -> InvestmentStats:
    summary = summarize(investments, "amount", "category", "investment_date", now=now)
    subscriptions = sum(
        1 for inv in investments if inv.payment_type == "subscription" and inv.status == "active"
    )
    return InvestmentStats(
        total_investments=summary.count,
        total_amount=summary.total,
        active_subscriptions=subscriptions,
        this_month_amount=summary.this_month,
        unique_categories=summary.unique,
    )


def project_budget_total(projects: Iterable[Project]) -> Decimal:
    return sum_amounts(projects, "budget")


def dashboard_stats(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    sales: Sequence[Sale],
) -> DashboardStats:
    completed = sum(1 for t in tasks if t.is_completed)
    return DashboardStats(
        total_projects=len(projects),
        completed_tasks=completed,
        active_tasks=len(tasks) - completed,
        total_sales=len(sales),
    )
