"""Remote event stores."""

from __future__ import annotations

from .events import SupabaseEventStore

__all__ = ["SupabaseEventStore"]
