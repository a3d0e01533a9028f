"""Reconciliation of a library source into a note repository."""

from __future__ import annotations

from .compare import differs_in_storage, stored_projection
from .engine import ReconciliationEngine, SyncAlreadyRunningError, SyncState
from .results import SyncMode, SyncReport, TierReport
from .trigger import DebouncedSync

__all__ = [
    "DebouncedSync",
    "ReconciliationEngine",
    "SyncAlreadyRunningError",
    "SyncMode",
    "SyncReport",
    "SyncState",
    "TierReport",
    "differs_in_storage",
    "stored_projection",
]
