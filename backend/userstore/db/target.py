"""
StorageTarget: where the users schema is provisioned.

A target is either the transient in-process database (`:memory:`) or a
durable SQLite file.  The location string is kept verbatim so it can be
logged and passed back to the caller unchanged.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL

from userstore.core.config import settings
from userstore.core.constants import MEMORY_TARGET, TargetKind

SQLITE_DRIVER = "sqlite+aiosqlite"


@dataclass(frozen=True)
class StorageTarget:
    """A transient or durable SQLite location."""

    location: str

    @classmethod
    def parse(cls, value: StorageTarget | str | os.PathLike | None = None) -> StorageTarget:
        """Normalise user input; None or "" selects the configured default file."""
        if isinstance(value, StorageTarget):
            return value
        if value is None or value == "":
            return cls(settings.DATABASE_PATH)
        return cls(os.fspath(value))

    @classmethod
    def memory(cls) -> StorageTarget:
        return cls(MEMORY_TARGET)

    @property
    def kind(self) -> TargetKind:
        return TargetKind.MEMORY if self.location == MEMORY_TARGET else TargetKind.FILE

    @property
    def is_transient(self) -> bool:
        return self.kind is TargetKind.MEMORY

    @property
    def url(self) -> URL:
        return URL.create(SQLITE_DRIVER, database=self.location)

    def __str__(self) -> str:
        return self.location
