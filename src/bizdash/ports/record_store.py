"""Record store interface."""

from typing import Protocol

from bizdash.core.records import Record


class RecordStoreError(Exception):
    """Raised when a record store call fails."""

    pass


class AuthenticationError(RecordStoreError):
    """Raised when the backend rejects the credentials."""

    pass


class RecordStore(Protocol):
    """Interface for the per-user record collections of any backend."""

    def fetch(self, collection: str) -> list[Record]:
        """Fetch every record the current user owns, newest first."""
        ...

    def fetch_raw(self, collection: str) -> list[dict]:
        """Fetch the same rows as fetch, untouched."""
        ...

    def create(self, collection: str, record: Record) -> Record:
        """Insert a record. Returns the stored record."""
        ...

    def update(self, collection: str, record_id: str, changes: dict) -> Record:
        """Apply field changes to one record. Returns the stored record."""
        ...

    def delete(self, collection: str, record_id: str) -> None:
        """Delete one record."""
        ...
