"""Shared constants and enums used across the application."""

from enum import StrEnum

# Shared by the record validator and the users.bio CHECK constraint.
BIO_MAX_LENGTH = 500

# SQLite sentinel for a transient, in-process database.
MEMORY_TARGET = ":memory:"

USERS_TABLE = "users"
BIO_LENGTH_CONSTRAINT = "ck_users_bio_length"


class ValidationMessage(StrEnum):
    """Human-readable messages reported by UserRecord.validate()."""

    NAME_REQUIRED = "Name is required"
    INVALID_EMAIL = "Invalid email format"
    BIO_TOO_LONG = f"Bio must not exceed {BIO_MAX_LENGTH} characters"


class TargetKind(StrEnum):
    """Where a storage target lives."""

    MEMORY = "MEMORY"
    FILE = "FILE"
