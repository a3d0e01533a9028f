"""Base error for the sync core."""

from __future__ import annotations


class TunevaultError(Exception):
    """Root of errors raised by ports and the reconciliation engine."""
