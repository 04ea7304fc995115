"""Tests for the Supabase REST adapter."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from bizdash.adapters.supabase_rest import SupabaseRecordStore
from bizdash.config import Config
from bizdash.core.records import Sale, Task
from bizdash.ports.record_store import AuthenticationError, RecordStoreError


def make_response(status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = b"" if payload is None else b"x"
    resp.json.return_value = payload
    resp.text = text
    return resp


@pytest.fixture
def config():
    return Config(
        supabase_url="https://abc.supabase.co",
        supabase_key="anon",
        access_token="jwt",
        user_id="u1",
        timezone="UTC",
    )


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def store(config, session):
    return SupabaseRecordStore(config, session=session)


class TestFetch:
    def test_scopes_to_user_and_orders(self, store, session):
        session.request.return_value = make_response(
            payload=[{"id": "t1", "title": "Plan", "status": "todo", "created_at": "2024-01-01T00:00:00Z"}]
        )

        tasks = store.fetch("tasks")

        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "GET"
        assert url == "https://abc.supabase.co/rest/v1/tasks"
        assert kwargs["params"]["user_id"] == "eq.u1"
        assert kwargs["params"]["order"] == "created_at.desc"
        assert kwargs["headers"]["apikey"] == "anon"
        assert kwargs["headers"]["Authorization"] == "Bearer jwt"
        assert tasks == [Task.from_api({"id": "t1", "title": "Plan", "status": "todo", "created_at": "2024-01-01T00:00:00Z"}, store.config.tz)]

    def test_falls_back_to_anon_key_token(self, config, session):
        config.access_token = ""
        session.request.return_value = make_response(payload=[])
        SupabaseRecordStore(config, session=session).fetch("notes")
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer anon"

    def test_empty_body(self, store, session):
        session.request.return_value = make_response(payload=None)
        assert store.fetch("sales") == []

    def test_fetch_raw(self, store, session):
        rows = [{"id": "s1", "sale_value": 10}]
        session.request.return_value = make_response(payload=rows)
        assert store.fetch_raw("sales") == rows


class TestErrors:
    def test_missing_credentials(self, session):
        store = SupabaseRecordStore(Config(), session=session)
        with pytest.raises(AuthenticationError):
            store.fetch("tasks")
        session.request.assert_not_called()

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_rejected(self, store, session, status):
        session.request.return_value = make_response(status, text="JWT expired")
        with pytest.raises(AuthenticationError):
            store.fetch("tasks")

    def test_server_error(self, store, session):
        session.request.return_value = make_response(500, text="boom")
        with pytest.raises(RecordStoreError, match="500"):
            store.fetch("tasks")

    def test_network_error(self, store, session):
        session.request.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(RecordStoreError):
            store.fetch("tasks")

    def test_unknown_collection(self, store, session):
        with pytest.raises(RecordStoreError):
            store.fetch("invoices")
        session.request.assert_not_called()


class TestMutations:
    def test_create_fills_user_and_returns_record(self, store, session):
        session.request.return_value = make_response(
            201, payload=[{"id": "s9", "client_name": "Acme", "sale_value": "99.90", "user_id": "u1"}]
        )

        sale = store.create("sales", Sale(id="", client_name="Acme", sale_value=Decimal("99.90"), sale_date=date(2024, 1, 5)))

        kwargs = session.request.call_args.kwargs
        assert session.request.call_args.args[0] == "POST"
        assert kwargs["json"]["user_id"] == "u1"
        assert kwargs["json"]["sale_value"] == "99.90"
        assert kwargs["headers"]["Prefer"] == "return=representation"
        assert sale.id == "s9"
        assert sale.sale_value == Decimal("99.90")

    def test_update(self, store, session):
        session.request.return_value = make_response(payload=[{"id": "t1", "status": "completed"}])
        task = store.update("tasks", "t1", {"status": "completed"})
        assert session.request.call_args.args[0] == "PATCH"
        assert session.request.call_args.kwargs["params"] == {"id": "eq.t1"}
        assert task.is_completed

    def test_update_nothing_returned(self, store, session):
        session.request.return_value = make_response(payload=[])
        with pytest.raises(RecordStoreError):
            store.update("tasks", "missing", {"status": "completed"})

    def test_delete(self, store, session):
        session.request.return_value = make_response(204)
        store.delete("notes", "n1")
        assert session.request.call_args.args[0] == "DELETE"
        assert session.request.call_args.kwargs["params"] == {"id": "eq.n1"}
