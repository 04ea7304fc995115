"""Supabase adapter - PostgREST client for the record collections."""

import logging

import requests

from bizdash.config import Config, load_config
from bizdash.core.records import COLLECTIONS, Record, record_from_api
from bizdash.ports.record_store import AuthenticationError, RecordStoreError

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"
TIMEOUT = 30


class SupabaseRecordStore:
    """
    Supabase REST adapter.

    Implements RecordStore protocol. Every read is scoped to the configured
    user; row-level security on the backend enforces the same boundary.
    No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        if not self.config.supabase_url or not self.config.supabase_key:
            raise AuthenticationError("Missing Supabase credentials. Add them to config/bizdash.conf")
        token = self.config.access_token or self.config.supabase_key
        headers = {
            "apikey": self.config.supabase_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, collection: str) -> str:
        if collection not in COLLECTIONS:
            raise RecordStoreError(f"Unknown collection: {collection}")
        return f"{self.config.supabase_url}{REST_PATH}/{collection}"

    def _request(
        self,
        method: str,
        collection: str,
        params: dict | None = None,
        json_body: dict | None = None,
        prefer: str | None = None,
    ) -> list[dict]:
        """Make an authenticated PostgREST request."""
        url = self._url(collection)
        headers = self._headers(prefer)
        logger.debug(f"{method} {url} params={params}")
        try:
            resp = self._session.request(
                method, url, headers=headers, params=params, json=json_body, timeout=TIMEOUT
            )
        except requests.RequestException as e:
            logger.error(f"{method} {collection} failed: {e}")
            raise RecordStoreError(f"Request to {collection} failed: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthenticationError(f"Backend rejected credentials: {resp.text}")
        if resp.status_code >= 400:
            logger.error(f"{method} {collection} returned {resp.status_code}: {resp.text}")
            raise RecordStoreError(f"{method} {collection} failed ({resp.status_code}): {resp.text}")

        if resp.status_code == 204 or not resp.content:
            return []
        data = resp.json()
        return data if isinstance(data, list) else [data]

    def _single(self, collection: str, rows: list[dict]) -> Record:
        if not rows:
            raise RecordStoreError(f"No {collection} record returned")
        return record_from_api(collection, rows[0], self.config.tz)

    def fetch(self, collection: str) -> list[Record]:
        """Fetch the user's records, newest first."""
        params = {"select": "*", "order": "created_at.desc"}
        if self.config.user_id:
            params["user_id"] = f"eq.{self.config.user_id}"
        rows = self._request("GET", collection, params=params)
        tz = self.config.tz
        return [record_from_api(collection, row, tz) for row in rows]

    def fetch_raw(self, collection: str) -> list[dict]:
        """Fetch the user's rows untouched, for backups."""
        params = {"select": "*", "order": "created_at.desc"}
        if self.config.user_id:
            params["user_id"] = f"eq.{self.config.user_id}"
        return self._request("GET", collection, params=params)

    def create(self, collection: str, record: Record) -> Record:
        body = record.to_api()
        if not body.get("user_id"):
            body["user_id"] = self.config.user_id
        rows = self._request("POST", collection, json_body=body, prefer="return=representation")
        return self._single(collection, rows)

    def update(self, collection: str, record_id: str, changes: dict) -> Record:
        rows = self._request(
            "PATCH",
            collection,
            params={"id": f"eq.{record_id}"},
            json_body=changes,
            prefer="return=representation",
        )
        return self._single(collection, rows)

    def delete(self, collection: str, record_id: str) -> None:
        self._request("DELETE", collection, params={"id": f"eq.{record_id}"})
