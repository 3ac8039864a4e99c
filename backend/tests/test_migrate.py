import re

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from userstore.core.config import settings
from userstore.core.constants import TargetKind
from userstore.db.errors import SchemaApplyError, StorageError, StoreOpenError
from userstore.db.migrate import run_migration
from userstore.db.session import open_engine
from userstore.db.target import StorageTarget

EXPECTED_COLUMNS = {
    "id": ("INTEGER", False),
    "name": ("TEXT", False),
    "email": ("TEXT", False),
    "bio": ("TEXT", True),
    "avatar_url": ("TEXT", True),
    "created_at": ("TEXT", False),
    "updated_at": ("TEXT", False),
}

INSERT_USER = text("INSERT INTO users (name, email, bio) VALUES (:name, :email, :bio)")


def _describe(sync_conn):
    inspector = inspect(sync_conn)
    return {
        "tables": inspector.get_table_names(),
        "columns": inspector.get_columns("users"),
        "pk": inspector.get_pk_constraint("users")["constrained_columns"],
        "checks": [c["name"] for c in inspector.get_check_constraints("users")],
    }


async def describe(engine):
    async with engine.connect() as conn:
        return await conn.run_sync(_describe)


# ─── StorageTarget ────────────────────────────


def test_target_memory_sentinel():
    target = StorageTarget.parse(":memory:")

    assert target.kind is TargetKind.MEMORY
    assert target.is_transient is True
    assert target.url.drivername == "sqlite+aiosqlite"
    assert target.url.database == ":memory:"


def test_target_defaults_to_configured_file(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_PATH", "./somewhere/users.db")

    for value in (None, ""):
        target = StorageTarget.parse(value)
        assert target.location == "./somewhere/users.db"
        assert target.is_transient is False


def test_target_accepts_paths(tmp_path):
    target = StorageTarget.parse(tmp_path / "users.db")

    assert target.kind is TargetKind.FILE
    assert target.url.database == str(tmp_path / "users.db")
    assert StorageTarget.parse(target) is target


# ─── Transient target ─────────────────────────


@pytest.mark.asyncio
async def test_memory_target_returns_live_handle(memory_engine):
    schema = await describe(memory_engine)

    assert schema["tables"] == ["users"]


@pytest.mark.asyncio
async def test_users_table_matches_schema(memory_engine):
    schema = await describe(memory_engine)

    columns = {c["name"]: (str(c["type"]), c["nullable"]) for c in schema["columns"]}
    assert columns == EXPECTED_COLUMNS
    assert schema["pk"] == ["id"]
    assert "ck_users_bio_length" in schema["checks"]


@pytest.mark.asyncio
async def test_memory_targets_are_independent():
    first = await run_migration(":memory:")
    second = await run_migration(":memory:")
    try:
        assert first.has_handle and second.has_handle
        assert first.engine is not second.engine

        async with first.engine.begin() as conn:
            await conn.execute(INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": None})

        for result, expected in ((first, 1), (second, 0)):
            assert (await describe(result.engine))["tables"] == ["users"]
            async with result.engine.connect() as conn:
                count = (await conn.execute(text("SELECT COUNT(*) FROM users"))).scalar_one()
            assert count == expected
    finally:
        await first.engine.dispose()
        await second.engine.dispose()


@pytest.mark.asyncio
async def test_bio_check_rejects_over_length_insert(memory_engine):
    with pytest.raises(IntegrityError, match="CHECK constraint failed"):
        async with memory_engine.begin() as conn:
            await conn.execute(
                INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": "a" * 501}
            )

    async with memory_engine.connect() as conn:
        count = (await conn.execute(text("SELECT COUNT(*) FROM users"))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_bio_at_limit_is_stored_with_defaults(memory_engine):
    async with memory_engine.begin() as conn:
        await conn.execute(
            INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": "a" * 500}
        )
        row = (await conn.execute(text("SELECT id, bio, created_at, updated_at FROM users"))).one()

    assert row.id == 1
    assert len(row.bio) == 500
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", row.created_at)
    assert row.updated_at is not None


@pytest.mark.asyncio
async def test_null_bio_passes_check(memory_engine):
    async with memory_engine.begin() as conn:
        await conn.execute(INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": None})
        bio = (await conn.execute(text("SELECT bio FROM users"))).scalar_one()

    assert bio is None


# ─── Durable target ───────────────────────────


@pytest.mark.asyncio
async def test_file_target_returns_no_handle(tmp_path):
    path = tmp_path / "users.db"

    result = await run_migration(path)

    assert result.engine is None
    assert result.has_handle is False
    assert result.target.location == str(path)
    assert path.exists()

    engine = open_engine(result.target)
    try:
        schema = await describe(engine)
        assert schema["tables"] == ["users"]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_rerun_is_create_if_absent_by_default(tmp_path):
    path = tmp_path / "users.db"

    await run_migration(path)
    result = await run_migration(path)

    assert result.engine is None


@pytest.mark.asyncio
async def test_rerun_without_checkfirst_fails_cleanly(tmp_path):
    path = tmp_path / "users.db"
    await run_migration(path, checkfirst=False)

    with pytest.raises(SchemaApplyError, match="already exists") as exc_info:
        await run_migration(path, checkfirst=False)

    assert exc_info.value.target == str(path)
    assert exc_info.value.details == {"checkfirst": False}

    engine = open_engine(StorageTarget.parse(path))
    try:
        assert (await describe(engine))["tables"] == ["users"]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_unopenable_target_raises_store_open_error(tmp_path):
    path = tmp_path / "missing" / "users.db"

    with pytest.raises(StoreOpenError) as exc_info:
        await run_migration(path)

    assert isinstance(exc_info.value, StorageError)
    assert exc_info.value.target == str(path)
    assert exc_info.value.__cause__ is not None
    assert not path.exists()


@pytest.mark.asyncio
async def test_memory_engine_uses_static_pool(memory_engine):
    assert isinstance(memory_engine.sync_engine.pool, StaticPool)


@pytest.mark.asyncio
@pytest.mark.parametrize("filename", ["users?v1.db", "users#draft.db", "users%20.db"])
async def test_file_target_with_url_characters_keeps_its_name(tmp_path, filename):
    path = tmp_path / filename

    result = await run_migration(path)

    assert result.target.location == str(path)
    assert sorted(p.name for p in tmp_path.iterdir()) == [filename]

    engine = open_engine(result.target)
    try:
        assert (await describe(engine))["tables"] == ["users"]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_bio_check_counts_characters_after_nul(memory_engine):
    with pytest.raises(IntegrityError, match="CHECK constraint failed"):
        async with memory_engine.begin() as conn:
            await conn.execute(
                INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": "\x00" + "a" * 500}
            )

    async with memory_engine.begin() as conn:
        await conn.execute(
            INSERT_USER, {"name": "John Doe", "email": "john@example.com", "bio": "\x00" + "a" * 499}
        )
        stored = (await conn.execute(text("SELECT bio FROM users"))).scalar_one()

    assert stored == "\x00" + "a" * 499
