"""Adapters - I/O implementations of ports."""

from .supabase_rest import SupabaseRecordStore
from .json_store import JsonRecordStore

__all__ = [
    "SupabaseRecordStore",
    "JsonRecordStore",
]
