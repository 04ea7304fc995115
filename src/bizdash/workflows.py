"""Workflow layer between the CLI/scheduler and the functional core.

Each function fetches what it needs from a record store, reads the clock once,
and hands plain data to the pure core.
"""

import logging
from datetime import date, datetime
from pathlib import Path

from .adapters.json_store import JsonRecordStore
from .adapters.supabase_rest import SupabaseRecordStore
from .config import DATA_DIR, Config
from .core.calendar import MonthGrid, build_month_grid
from .core.deadlines import DeadlineAlert, upcoming_deadlines
from .core.filters import FilterCriteria, filter_records
from .core.records import COLLECTIONS, Record, Task
from .core.reports import ReportData, ReportStats, SalesBreakdown, report_stats, sales_breakdown, scope_report
from .core.stats import (
    DashboardStats,
    InvestmentStats,
    SalesStats,
    dashboard_stats,
    investment_stats,
    sales_stats,
)
from .core.tasks import ParentTask, compose_tasks, find_orphans
from .ports.record_store import RecordStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> RecordStore:
    """Resolve the record store from config."""
    if config.offline_dir:
        return JsonRecordStore(config.offline_dir, tz=config.tz)
    return SupabaseRecordStore(config)


def now_in(config: Config) -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(config.tz)


def list_records(store: RecordStore, collection: str, criteria: FilterCriteria) -> list[Record]:
    return filter_records(store.fetch(collection), criteria)


def compile_sales(store: RecordStore, now: datetime) -> tuple[SalesStats, SalesBreakdown]:
    sales = store.fetch("sales")
    return sales_stats(sales, now), sales_breakdown(sales)


def compile_investments(store: RecordStore, now: datetime) -> InvestmentStats:
    return investment_stats(store.fetch("investments"), now)


def compile_dashboard(store: RecordStore) -> DashboardStats:
    return dashboard_stats(store.fetch("projects"), store.fetch("tasks"), store.fetch("sales"))


def compile_calendar(store: RecordStore, config: Config, year: int, month: int) -> MonthGrid:
    return build_month_grid(
        year,
        month,
        store.fetch("tasks"),
        date_field="due_date",
        first_weekday=config.first_weekday,
    )


def compile_deadlines(store: RecordStore, config: Config, now: datetime) -> list[DeadlineAlert]:
    return upcoming_deadlines(
        store.fetch("tasks"),
        store.fetch("projects"),
        now,
        window_days=config.alert_window_days,
        limit=config.alert_limit,
    )


def compile_task_tree(store: RecordStore) -> tuple[list[ParentTask], list[Task]]:
    """Parents with subtasks, plus subtasks whose parent is missing."""
    tasks = store.fetch("tasks")
    return compose_tasks(tasks), find_orphans(tasks)


def compile_report(
    store: RecordStore,
    project_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> ReportStats:
    data = ReportData(
        projects=store.fetch("projects"),
        tasks=store.fetch("tasks"),
        sales=store.fetch("sales"),
        notes=store.fetch("notes"),
    )
    return report_stats(scope_report(data, project_id, date_from, date_to))


def get_backup_dir(config: Config) -> Path:
    """Resolve backup directory from config."""
    if config.backup_dir:
        return Path(config.backup_dir).expanduser()
    return DATA_DIR / "backups"


def run_backup(config: Config, store: RecordStore | None = None, now: datetime | None = None) -> Path:
    """Snapshot every collection into a timestamped directory. Returns the directory."""
    store = store or get_store(config)
    now = now or now_in(config)
    target = get_backup_dir(config) / now.strftime("%Y%m%d-%H%M%S")
    snapshot = JsonRecordStore(target)

    logger.info(f"Starting backup to {target}")
    for collection in COLLECTIONS:
        rows = store.fetch_raw(collection)
        snapshot.write_rows(collection, rows)
        logger.info(f"Backed up {len(rows)} {collection}")
    return target
