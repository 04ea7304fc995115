"""bizdash CLI - business dashboard in the terminal."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal

import click

from .config import load_config
from .core.calendar import shift_month
from .core.deadlines import Urgency, classify_deadline, days_until
from .core.filters import FilterCriteria, collect_tags
from .core.records import COLLECTIONS
from .ports.record_store import RecordStoreError
from .workflows import (
    compile_calendar,
    compile_dashboard,
    compile_deadlines,
    compile_investments,
    compile_report,
    compile_sales,
    compile_task_tree,
    get_store,
    list_records,
    now_in,
    run_backup,
)

URGENCY_MARKERS = {
    Urgency.OVERDUE: "!!",
    Urgency.DUE_SOON: "! ",
    Urgency.ON_TRACK: "  ",
    Urgency.NONE: "  ",
}

DATE_OPTION = click.DateTime(formats=["%Y-%m-%d"])


def format_money(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01')):,}"


def format_relative(days: int | None) -> str:
    """Human-readable distance to a due date."""
    if days is None:
        return "no date"
    if days < 0:
        return f"{-days} days ago"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_where(where: tuple[str, ...]) -> dict[str, str]:
    equals = {}
    for item in where:
        if "=" not in item:
            raise click.BadParameter(f"expected field=value, got {item!r}", param_hint="--where")
        name, _, value = item.partition("=")
        equals[name.strip()] = value.strip()
    return equals


@click.group()
@click.version_option(package_name="bizdash")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, verbose: bool):
    """bizdash - business dashboard CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )
    ctx.obj = load_config()


@main.command("list")
@click.argument("collection", type=click.Choice(sorted(COLLECTIONS)))
@click.option("--search", default="", help="Case-insensitive text search")
@click.option("--where", multiple=True, help="field=value equality filter ('all' disables)")
@click.option("--tag", default="", help="Only records carrying this tag")
@click.option("--from", "date_from", type=DATE_OPTION, help="Created on or after (YYYY-MM-DD)")
@click.option("--to", "date_to", type=DATE_OPTION, help="Created on or before (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_cmd(config, collection, search, where, tag, date_from, date_to, as_json):
    """List a collection with filters applied."""
    criteria = FilterCriteria.for_collection(
        collection,
        search=search,
        equals=_parse_where(where),
        tag=tag,
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
    )
    try:
        records = list_records(get_store(config), collection, criteria)
    except RecordStoreError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([asdict(r) for r in records], indent=2, default=str))
        return

    if not records:
        click.echo(f"No {collection} match.")
        return

    active = criteria.active_filter_count()
    if active:
        click.echo(f"({active} active filters)")
    for record in records:
        label = getattr(record, "title", "") or getattr(record, "name", "") or getattr(record, "client_name", "")
        click.echo(f"- {label} [{record.id}]")

    tags = collect_tags(records)
    if tags:
        click.echo(f"\nTags: {', '.join(tags)}")


@main.group()
def stats():
    """Summary statistics."""
    pass


@stats.command("sales")
@click.pass_obj
def stats_sales(config):
    """Sales totals, payment status and top categories."""
    try:
        summary, breakdown = compile_sales(get_store(config), now_in(config))
    except RecordStoreError as e:
        _fail(e)

    click.echo(f"Total sales:      {summary.total_sales}")
    click.echo(f"Total value:      {format_money(summary.total_value)}")
    click.echo(f"Unique clients:   {summary.unique_clients}")
    click.echo(f"This month:       {format_money(summary.this_month_value)}")

    if breakdown.monthly:
        click.echo("\n### By month")
        for month, value in breakdown.monthly:
            click.echo(f"  {month.strftime('%b %Y')}  {format_money(value)}")

    click.echo("\n### Payment status")
    for status, count in breakdown.payment_status.items():
        click.echo(f"  {status:8} {count}")

    if breakdown.top_categories:
        click.echo("\n### Top categories")
        for category, count in breakdown.top_categories:
            click.echo(f"  {category}: {count}")


@stats.command("investments")
@click.pass_obj
def stats_investments(config):
    """Investment totals and subscriptions."""
    try:
        summary = compile_investments(get_store(config), now_in(config))
    except RecordStoreError as e:
        _fail(e)

    click.echo(f"Investments:          {summary.total_investments}")
    click.echo(f"Total amount:         {format_money(summary.total_amount)}")
    click.echo(f"Active subscriptions: {summary.active_subscriptions}")
    click.echo(f"This month:           {format_money(summary.this_month_amount)}")
    click.echo(f"Categories:           {summary.unique_categories}")


@stats.command("dashboard")
@click.pass_obj
def stats_dashboard(config):
    """Home page counters."""
    try:
        summary = compile_dashboard(get_store(config))
    except RecordStoreError as e:
        _fail(e)

    click.echo(f"Projects:        {summary.total_projects}")
    click.echo(f"Completed tasks: {summary.completed_tasks}")
    click.echo(f"Active tasks:    {summary.active_tasks}")
    click.echo(f"Sales:           {summary.total_sales}")


@main.command()
@click.option("--month", "month_str", default=None, help="Month to show (YYYY-MM), default current")
@click.option("--offset", default=0, help="Months to move from --month")
@click.pass_obj
def calendar(config, month_str: str | None, offset: int):
    """Month grid of task due dates."""
    today = now_in(config).date()
    if month_str:
        try:
            parsed = datetime.strptime(month_str, "%Y-%m")
        except ValueError:
            raise click.BadParameter("expected YYYY-MM", param_hint="--month") from None
        year, month = parsed.year, parsed.month
    else:
        year, month = today.year, today.month
    year, month = shift_month(year, month, offset)

    try:
        grid = compile_calendar(get_store(config), config, year, month)
    except RecordStoreError as e:
        _fail(e)

    headers = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]
    headers = headers[config.first_weekday :] + headers[: config.first_weekday]
    # Cells are day number, busy mark (*) and today mark (<)
    click.echo(f"{datetime(year, month, 1).strftime('%B %Y'):^34}")
    click.echo(" ".join(f"{h:>2}  " for h in headers))
    for week in grid.weeks():
        cells = []
        for day in week:
            if day is None:
                cells.append("    ")
                continue
            mark = "*" if day.records else " "
            now_mark = "<" if day.is_today(today) else " "
            cells.append(f"{day.date.day:>2}{mark}{now_mark}")
        click.echo(" ".join(cells))

    busy = [d for d in grid.days if d.records]
    if busy:
        click.echo()
    for day in busy:
        titles = ", ".join(r.title for r in day.records)
        click.echo(f"{day.date.strftime('%a %d')}: {titles}")


@main.command()
@click.pass_obj
def deadlines(config):
    """Open tasks and projects that are overdue or due soon."""
    now = now_in(config)
    try:
        alerts = compile_deadlines(get_store(config), config, now)
    except RecordStoreError as e:
        _fail(e)

    if not alerts:
        click.echo("Nothing due soon.")
        return

    for alert in alerts:
        state = "OVERDUE" if alert.overdue else "due"
        when = format_relative(days_until(alert.due, now))
        click.echo(f"- [{alert.kind}] {alert.title} ({state} {when}, priority: {alert.priority})")


@main.command()
@click.pass_obj
def tasks(config):
    """Tasks with their subtasks, marked by deadline urgency."""
    now = now_in(config)
    try:
        parents, orphans = compile_task_tree(get_store(config))
    except RecordStoreError as e:
        _fail(e)

    if not parents and not orphans:
        click.echo("No tasks.")
        return

    def line(task, indent: str = "") -> str:
        urgency = classify_deadline(task.due_date, now, config.due_soon_days)
        done = "x" if task.is_completed else " "
        return f"{URGENCY_MARKERS[urgency]}{indent}[{done}] {task.title} ({format_relative(days_until(task.due_date, now))})"

    for parent in parents:
        click.echo(line(parent.task))
        if parent.subtasks:
            done, total = parent.progress()
            for sub in parent.subtasks:
                click.echo(line(sub, "    "))
            click.echo(f"      {done}/{total} subtasks")

    if orphans:
        click.echo("\n### Unassigned subtasks")
        for task in orphans:
            click.echo(line(task))


@main.command()
@click.option("--project", "project_id", default=None, help="Project id to report on")
@click.option("--from", "date_from", type=DATE_OPTION, help="Created on or after (YYYY-MM-DD)")
@click.option("--to", "date_to", type=DATE_OPTION, help="Created on or before (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def report(config, project_id, date_from, date_to, as_json):
    """Totals across projects, tasks, sales and notes."""
    try:
        result = compile_report(
            get_store(config),
            project_id=project_id,
            date_from=date_from.date() if date_from else None,
            date_to=date_to.date() if date_to else None,
        )
    except RecordStoreError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(asdict(result), indent=2, default=str))
        return

    click.echo(f"Projects:  {result.completed_projects}/{result.total_projects} completed")
    click.echo(f"Tasks:     {result.completed_tasks}/{result.total_tasks} completed")
    click.echo(f"Sales:     {result.total_sales} ({format_money(result.total_revenue)})")
    click.echo(f"Budget:    {format_money(result.total_budget)}")
    click.echo(f"Notes:     {result.total_notes}")


@main.command()
@click.option("--schedule", is_flag=True, help="Keep running and back up daily at BACKUP_TIME")
@click.pass_obj
def backup(config, schedule: bool):
    """Snapshot every collection to JSON files."""
    if schedule:
        from .scheduler import run_scheduler

        run_scheduler(config)
        return

    try:
        target = run_backup(config)
    except RecordStoreError as e:
        _fail(e)
    click.echo(f"Backup written to {target}")


if __name__ == "__main__":
    main()
