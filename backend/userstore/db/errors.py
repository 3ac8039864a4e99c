"""
Exception hierarchy for storage setup and writes.

All storage exceptions inherit from StorageError so callers can
catch broadly or narrowly as needed.  Each exception carries the
target it concerns plus free-form details for logging/debugging.

Record validation never raises; see UserRecord.validate().
"""

from __future__ import annotations

import re

_CHECK_FAILED = re.compile(r"CHECK constraint failed:\s*(\w+)")


class StorageError(Exception):
    """Base exception for all storage errors."""

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.target = target
        self.details = details or {}
        super().__init__(message)


class StoreOpenError(StorageError):
    """The target could not be opened (bad path, permissions)."""
    pass


class SchemaApplyError(StorageError):
    """The schema DDL batch failed; the target has already been released."""
    pass


class ConstraintViolationError(StorageError):
    """The storage engine rejected a write that breaks a schema constraint."""

    def __init__(
        self,
        message: str,
        *,
        constraint: str | None = None,
        **kwargs,
    ) -> None:
        if constraint is None:
            match = _CHECK_FAILED.search(message)
            constraint = match.group(1) if match else None
        self.constraint = constraint
        super().__init__(message, **kwargs)
