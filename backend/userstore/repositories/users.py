"""
User repository: the write path for the users table.

Repository rules:
- Pure data-access logic only; records are NOT validated here
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userstore.core.logging import get_logger
from userstore.db.errors import ConstraintViolationError
from userstore.db.models.user import User
from userstore.validation.user_record import UserRecord

logger = get_logger(__name__)


async def insert_user(db: AsyncSession, record: UserRecord) -> User:
    """
    Insert ``record`` and return the stored row with its assigned id.

    Any id already on the record is ignored.  A row the schema rejects
    (e.g. an over-length bio) raises ConstraintViolationError; the session
    must then be rolled back by the caller.
    """
    values = record.to_plain_record()
    values.pop("id")
    user = User(**{key: value for key, value in values.items() if value is not None})
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("User insert rejected by storage", error=str(exc.orig))
        raise ConstraintViolationError(str(exc.orig)) from exc
    return user
