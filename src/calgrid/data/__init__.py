"""Data access layer."""

from __future__ import annotations

from .store import EventNotFoundError, EventStore, JsonEventStore
from .supabase import SupabaseGateway, SupabaseNotInitializedError
from .repositories import SupabaseEventStore

__all__ = [
    "EventNotFoundError",
    "EventStore",
    "JsonEventStore",
    "SupabaseEventStore",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
]
