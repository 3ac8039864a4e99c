"""
Schema initialisation for the `users` table.

Runs once against a fresh target:

    open target  →  apply DDL in one transaction  →  return or release handle

An in-memory target only exists while a connection to it is open, so its
engine is handed back to the caller (who must `await engine.dispose()`).
A file target keeps the schema on disk; its engine is disposed here and the
caller opens a new one later via `userstore.db.session.open_engine`.

Usage:
    result = await run_migration(":memory:")
    async with make_session_factory(result.engine)() as session:
        ...
    await result.engine.dispose()
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from userstore.core.logging import get_logger
from userstore.db.errors import SchemaApplyError, StoreOpenError
from userstore.db.models import Base
from userstore.db.session import open_engine
from userstore.db.target import StorageTarget

logger = get_logger(__name__)


@dataclass
class MigrationResult:
    """
    Outcome of a successful run_migration() call.

    Args:
        target: The target the schema was applied to.
        engine: Live engine for a transient target, None for a durable one.
    """

    target: StorageTarget
    engine: AsyncEngine | None = None

    @property
    def has_handle(self) -> bool:
        return self.engine is not None


async def run_migration(
    target: StorageTarget | str | os.PathLike | None = None,
    *,
    checkfirst: bool = True,
) -> MigrationResult:
    """
    Create the `users` table on ``target``.

    With ``checkfirst=True`` an existing table is left untouched
    (create-if-absent).  With ``checkfirst=False`` the DDL is issued
    unconditionally, so a second run fails with SchemaApplyError
    (create-or-fail).

    Raises:
        StoreOpenError: the target could not be opened.
        SchemaApplyError: the DDL batch failed.  Nothing is left open.
    """
    target = StorageTarget.parse(target)
    log = logger.bind(target=str(target), kind=target.kind.value)
    engine = open_engine(target)

    try:
        conn = await engine.connect()
    except (SQLAlchemyError, OSError) as exc:
        await engine.dispose()
        log.error("Failed to open storage target", error=str(exc))
        raise StoreOpenError(
            f"Could not open {target}: {exc}", target=str(target)
        ) from exc

    log.debug("Storage target opened")

    try:
        async with conn.begin():
            await conn.run_sync(Base.metadata.create_all, checkfirst=checkfirst)
    except SQLAlchemyError as exc:
        await conn.close()
        await engine.dispose()
        log.error("Schema apply failed", error=str(exc))
        raise SchemaApplyError(
            f"Could not apply schema to {target}: {exc}",
            target=str(target),
            details={"checkfirst": checkfirst},
        ) from exc

    await conn.close()
    log.info("Database migration completed successfully")

    if target.is_transient:
        log.debug("Returning live handle for transient target")
        return MigrationResult(target=target, engine=engine)

    await engine.dispose()
    log.debug("Released handle for durable target")
    return MigrationResult(target=target)
