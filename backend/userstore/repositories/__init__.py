"""
Repositories package: data-access layer.

Each repository file handles all DB operations for one domain entity.
Repositories do NOT validate records or handle process concerns.

Convention:
    - One file per aggregate root (e.g., users.py)
    - All functions accept `AsyncSession` as the first argument
    - Use `flush()` internally; commit/rollback belongs to the caller
"""
