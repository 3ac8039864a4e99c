"""
Models package: re-exports Base and all models.

Import models here so `Base.metadata.create_all` picks up every table.

When adding a new model:
    1. Create `userstore/db/models/<table_name>.py`
    2. Import it here
"""

from userstore.db.models.base import Base
from userstore.db.models.user import User

__all__ = [
    "Base",
    "User",
]
