"""calgrid: slot indexing, overlap layout and drag reconciliation for calendar grids."""

from __future__ import annotations

from .cli import main as main

__all__ = ["main"]
