"""Pure report assembly - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .filters import FilterCriteria, filter_records
from .records import Note, Project, Sale, Task
from .stats import count_by, monthly_totals, project_budget_total, sum_amounts, top_values

PAYMENT_STATUSES = ("paid", "partial", "pending")


@dataclass
class ReportData:
    """The collections a report is computed from."""

    projects: list[Project] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    sales: list[Sale] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)


@dataclass(frozen=True)
class ReportStats:
    total_projects: int
    completed_projects: int
    total_tasks: int
    completed_tasks: int
    total_sales: int
    total_revenue: Decimal
    total_notes: int
    total_budget: Decimal


@dataclass
class SalesBreakdown:
    """Monthly revenue, payment status distribution and top categories."""

    monthly: list[tuple[date, Decimal]]
    payment_status: dict[str, int]
    top_categories: list[tuple[str, int]]


def scope_report(
    data: ReportData,
    project_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> ReportData:
    """
    Narrow report data to one project and a creation-date range.

    Tasks follow the project by id, sales by the project's title. Notes are
    not tied to projects and only get the date range. Pure function - no I/O.
    """
    projects, tasks, sales, notes = data.projects, data.tasks, data.sales, data.notes

    if project_id:
        projects = [p for p in projects if p.id == project_id]
        tasks = [t for t in tasks if t.project_id == project_id]
        title = projects[0].title if projects else None
        sales = [s for s in sales if title is not None and s.project_name == title]

    criteria = FilterCriteria(date_field="created_at", date_from=date_from, date_to=date_to)
    return ReportData(
        projects=filter_records(projects, criteria),
        tasks=filter_records(tasks, criteria),
        sales=filter_records(sales, criteria),
        notes=filter_records(notes, criteria),
    )


def report_stats(data: ReportData) -> ReportStats:
    return ReportStats(
        total_projects=len(data.projects),
        completed_projects=sum(1 for p in data.projects if p.status == "completed"),
        total_tasks=len(data.tasks),
        completed_tasks=sum(1 for t in data.tasks if t.is_completed),
        total_sales=len(data.sales),
        total_revenue=sum_amounts(data.sales, "sale_value"),
        total_notes=len(data.notes),
        total_budget=project_budget_total(data.projects),
    )


def sales_breakdown(sales: list[Sale], top: int = 5) -> SalesBreakdown:
    payments = {status: 0 for status in PAYMENT_STATUSES}
    for status, n in count_by(sales, "payment_status").items():
        # Anything unrecognised is still owed
        key = status if status in payments else "pending"
        payments[key] += n
    return SalesBreakdown(
        monthly=monthly_totals(sales, "sale_value", "sale_date"),
        payment_status=payments,
        top_categories=top_values(sales, "categories", top),
    )
