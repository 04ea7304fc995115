"""Tests for the command-line interface."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from bizdash.adapters.json_store import JsonRecordStore
from bizdash.cli import format_money, format_relative, main
from bizdash.config import Config
from bizdash.ports.record_store import AuthenticationError


@pytest.fixture
def data_dir(tmp_path):
    store = JsonRecordStore(tmp_path / "data")
    store.write_rows(
        "investments",
        [
            {"id": "i1", "title": "Figma seat", "vendor": "Figma", "category": "software", "amount": 45,
             "payment_type": "subscription", "status": "active", "investment_date": "2024-01-05",
             "tags": ["design"], "created_at": "2024-01-05T10:00:00"},
            {"id": "i2", "title": "Laptop", "vendor": "Dell", "category": "hardware", "amount": 1200.5,
             "payment_type": "one_time", "status": "active", "investment_date": "2023-11-20",
             "created_at": "2023-11-20T10:00:00"},
        ],
    )
    store.write_rows(
        "tasks",
        [
            {"id": "a", "title": "Ship site", "status": "todo", "due_date": "2024-01-08T10:00:00",
             "created_at": "2024-01-01T00:00:00"},
            {"id": "a1", "title": "Copy", "status": "completed", "parent_task_id": "a",
             "created_at": "2024-01-01T00:00:00"},
            {"id": "x", "title": "Stray", "status": "todo", "parent_task_id": "gone",
             "created_at": "2024-01-01T00:00:00"},
        ],
    )
    return tmp_path / "data"


@pytest.fixture
def run(data_dir, tmp_path):
    config = Config(offline_dir=str(data_dir), timezone="UTC", backup_dir=str(tmp_path / "backups"))
    runner = CliRunner()

    def _run(*args):
        with patch("bizdash.cli.load_config", return_value=config), patch(
            "bizdash.cli.now_in", return_value=datetime(2024, 1, 10, 12, 0)
        ):
            return runner.invoke(main, list(args))

    return _run


class TestFormatting:
    def test_money(self):
        from decimal import Decimal

        assert format_money(Decimal("1245.5")) == "1,245.50"

    @pytest.mark.parametrize(
        "days, text",
        [(None, "no date"), (-3, "3 days ago"), (0, "today"), (1, "tomorrow"), (5, "in 5 days")],
    )
    def test_relative(self, days, text):
        assert format_relative(days) == text


class TestList:
    def test_search(self, run):
        result = run("list", "investments", "--search", "dell")
        assert result.exit_code == 0
        assert "Laptop" in result.output
        assert "Figma" not in result.output

    def test_where_and_tags(self, run):
        result = run("list", "investments", "--where", "category=software", "--where", "status=all")
        assert result.exit_code == 0
        assert "(1 active filters)" in result.output
        assert "Figma seat" in result.output
        assert "Tags: design" in result.output

    def test_json(self, run):
        result = run("list", "investments", "--from", "2024-01-01", "--json")
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [r["id"] for r in rows] == ["i1"]

    def test_bad_where(self, run):
        result = run("list", "investments", "--where", "category")
        assert result.exit_code != 0

    def test_no_matches(self, run):
        result = run("list", "notes")
        assert "No notes match." in result.output


class TestStats:
    def test_investments(self, run):
        result = run("stats", "investments")
        assert result.exit_code == 0
        assert "Total amount:         1,245.50" in result.output
        assert "Active subscriptions: 1" in result.output
        assert "This month:           45.00" in result.output

    def test_sales_ignores_non_finite_values(self, run, data_dir):
        JsonRecordStore(data_dir).write_rows(
            "sales",
            [
                {"id": "s1", "client_name": "Acme", "sale_value": "Infinity", "sale_date": "2024-01-03"},
                {"id": "s2", "client_name": "Acme", "sale_value": 80, "sale_date": "2024-01-04"},
            ],
        )
        result = run("stats", "sales")
        assert result.exit_code == 0
        assert "Total value:      80.00" in result.output

    def test_dashboard(self, run):
        result = run("stats", "dashboard")
        assert "Completed tasks: 1" in result.output
        assert "Active tasks:    2" in result.output


class TestViews:
    def test_calendar(self, run):
        result = run("calendar", "--month", "2024-01")
        assert result.exit_code == 0
        assert "January 2024" in result.output
        assert "Mon 08: Ship site" in result.output

    def test_calendar_marks_today_and_busy_days(self, run, data_dir):
        JsonRecordStore(data_dir).write_rows(
            "tasks",
            [
                {"id": "a", "title": "Ship site", "status": "todo", "due_date": "2024-01-08T10:00:00"},
                {"id": "b", "title": "Invoice", "status": "todo", "due_date": "2024-01-10T09:00:00"},
            ],
        )
        result = run("calendar", "--month", "2024-01")
        lines = result.output.splitlines()
        week = next(line for line in lines if "10*<" in line)
        assert " 8* " in week
        # Today keeps the same cell width as the header row
        assert len(week) == len(lines[1])

    def test_calendar_today_without_tasks(self, run):
        result = run("calendar", "--month", "2024-01")
        assert "10 <" in result.output
        assert " 8* " in result.output

    def test_calendar_bad_month(self, run):
        assert run("calendar", "--month", "Jan").exit_code != 0

    def test_tasks_shows_tree_and_orphans(self, run):
        result = run("tasks")
        assert result.exit_code == 0
        assert "!![ ] Ship site (2 days ago)" in result.output
        assert "[x] Copy" in result.output
        assert "1/1 subtasks" in result.output
        assert "Unassigned subtasks" in result.output
        assert "Stray" in result.output

    def test_deadlines(self, run):
        result = run("deadlines")
        assert "[task] Ship site (OVERDUE 2 days ago" in result.output

    def test_report_json(self, run):
        result = run("report", "--json")
        assert json.loads(result.output)["total_tasks"] == 3


class TestBackup:
    def test_backup(self, run, tmp_path):
        result = run("backup")
        assert result.exit_code == 0
        assert "Backup written to" in result.output
        assert any((tmp_path / "backups").iterdir())


class TestErrors:
    @patch("bizdash.cli.get_store")
    def test_store_error_exits_1(self, mock_get_store, run):
        mock_get_store.return_value.fetch.side_effect = AuthenticationError("no credentials")
        result = run("stats", "dashboard")
        assert result.exit_code == 1
        assert "Error: no credentials" in result.output
