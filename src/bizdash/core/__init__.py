"""Functional core - pure business logic with no I/O."""

from .records import (
    COLLECTIONS,
    Customer,
    DesignBriefing,
    Investment,
    Note,
    Project,
    Record,
    Sale,
    Task,
    record_from_api,
)
from .filters import ALL, FilterCriteria, collect_tags, filter_records
from .stats import SummaryStats, summarize
from .calendar import CalendarDay, MonthGrid, build_month_grid
from .deadlines import DeadlineAlert, Urgency, classify_deadline, upcoming_deadlines
from .tasks import ParentTask, compose_tasks, find_orphans
from .reports import ReportData, ReportStats, report_stats, scope_report

__all__ = [
    # Records
    "COLLECTIONS",
    "Record",
    "Project",
    "Task",
    "Sale",
    "Customer",
    "Note",
    "Investment",
    "DesignBriefing",
    "record_from_api",
    # Filters
    "ALL",
    "FilterCriteria",
    "filter_records",
    "collect_tags",
    # Stats
    "SummaryStats",
    "summarize",
    # Calendar
    "CalendarDay",
    "MonthGrid",
    "build_month_grid",
    # Deadlines
    "Urgency",
    "DeadlineAlert",
    "classify_deadline",
    "upcoming_deadlines",
    # Tasks
    "ParentTask",
    "compose_tasks",
    "find_orphans",
    # Reports
    "ReportData",
    "ReportStats",
    "scope_report",
    "report_stats",
]
