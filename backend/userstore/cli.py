"""
Command-line entry point for schema initialisation.

Usage:
    userstore-migrate                 # default file target (DATABASE_PATH)
    userstore-migrate ./data/app.db   # explicit file target
    userstore-migrate :memory:        # transient target, discarded on exit

Exit code is 0 on success and 1 on any failure; the reason goes to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from userstore.core.config import settings
from userstore.core.logging import get_logger, setup_logging
from userstore.db.migrate import run_migration
from userstore.db.target import StorageTarget

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userstore-migrate",
        description="Create the users table on a SQLite target.",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help=f"SQLite file path or ':memory:' (default: {settings.DATABASE_PATH})",
    )
    return parser


async def _migrate(target: StorageTarget) -> None:
    result = await run_migration(target)
    if result.engine is not None:
        await result.engine.dispose()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    target = StorageTarget.parse(args.target)

    try:
        setup_logging()
        if not args.target and not target.is_transient:
            Path(target.location).parent.mkdir(parents=True, exist_ok=True)
        asyncio.run(_migrate(target))
    except Exception as exc:
        logger.error("Migration failed", target=str(target), error=str(exc))
        print(f"Migration failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
