"""
UserRecord: in-memory user entity and its persistence-readiness rules.

Validation never raises: every rule is a boolean query and validate()
collects the failing rules as messages, in a fixed order (name, email,
bio).  Whether an invalid record is rejected is the caller's decision.

Whitespace follows Python: the regex whitespace class and str.strip()
treat U+001C..U+001F as whitespace and U+FEFF as not, the reverse of
JavaScript regexes and trim().
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from userstore.core.constants import BIO_MAX_LENGTH, ValidationMessage
from userstore.db.models.base import isoformat, utcnow

Clock = Callable[[], datetime]

# local-part "@" domain "." tld; deliberately loose
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of UserRecord.validate()."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class UserRecord:
    """
    A single user, not aware of whether it has been saved.

    Args:
        name: Display name; required, compared after trimming.
        email: Address in the loose `local@domain.tld` shape.
        id: Storage-assigned primary key, None until persisted.
        bio: Optional free text, at most BIO_MAX_LENGTH characters.
        avatar_url: Optional, unconstrained.
        created_at: ISO-8601 timestamp.
        updated_at: ISO-8601 timestamp.
    """

    name: Any
    email: Any
    id: int | None = None
    bio: Any = None
    avatar_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_input(cls, data: Mapping[str, Any], clock: Clock = utcnow) -> UserRecord:
        """
        Build a record from a loosely-typed mapping.

        Missing optional fields become None; missing or empty timestamps
        become the clock's current time.  Name and email are copied as-is,
        even when absent, so that validate() can report them.
        """
        now = isoformat(clock())
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            email=data.get("email"),
            bio=data.get("bio"),
            avatar_url=data.get("avatar_url"),
            created_at=data.get("created_at") or now,
            updated_at=data.get("updated_at") or now,
        )

    # ─── Field rules ──────────────────────────────
    def is_name_valid(self) -> bool:
        return isinstance(self.name, str) and len(self.name.strip()) > 0

    def is_email_valid(self) -> bool:
        if not isinstance(self.email, str):
            return False
        return EMAIL_PATTERN.fullmatch(self.email) is not None

    def is_bio_valid(self) -> bool:
        if self.bio is None:
            return True  # optional
        return isinstance(self.bio, str) and len(self.bio) <= BIO_MAX_LENGTH

    # ─── Whole record ─────────────────────────────
    def validate(self) -> ValidationResult:
        """Run every rule and collect the messages of those that fail."""
        errors: list[str] = []

        if not self.is_name_valid():
            errors.append(ValidationMessage.NAME_REQUIRED.value)

        if not self.is_email_valid():
            errors.append(ValidationMessage.INVALID_EMAIL.value)

        if not self.is_bio_valid():
            errors.append(ValidationMessage.BIO_TOO_LONG.value)

        return ValidationResult(is_valid=not errors, errors=errors)

    def to_plain_record(self) -> dict[str, Any]:
        """Serialise for a storage write; unset fields are kept as None."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
