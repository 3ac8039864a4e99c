"""
User model: storage definition of the `users` table.

The bio length CHECK mirrors UserRecord.is_bio_valid() so a writer that
skips validation still cannot persist an over-length bio.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from userstore.core.constants import BIO_LENGTH_CONSTRAINT, BIO_MAX_LENGTH, USERS_TABLE
from userstore.db.models.base import ISO_NOW_DEFAULT, Base


class User(Base):
    __tablename__ = USERS_TABLE
    __table_args__ = (
        # length() stops at the first NUL; count every character like len()
        CheckConstraint(
            f"length(replace(bio, char(0), ' ')) <= {BIO_MAX_LENGTH}",
            name=BIO_LENGTH_CONSTRAINT,
        ),
        {"sqlite_autoincrement": True},
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps (ISO-8601 text)
    created_at: Mapped[str] = mapped_column(
        Text, nullable=False, server_default=ISO_NOW_DEFAULT
    )
    updated_at: Mapped[str] = mapped_column(
        Text, nullable=False, server_default=ISO_NOW_DEFAULT
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} {self.email} name={self.name!r}>"
