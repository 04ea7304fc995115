"""Ports - interfaces/protocols for external dependencies."""

from .record_store import AuthenticationError, RecordStore, RecordStoreError

__all__ = [
    "RecordStore",
    "RecordStoreError",
    "AuthenticationError",
]
