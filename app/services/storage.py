"""
Conflict-tolerant write helpers.

The voting core relies on two storage contracts:

- insert_if_absent: insert a row unless one with the same key exists,
  and report the row id plus whether this call created it.
- upsert: insert a row, or overwrite the non-key columns of the existing
  row with the same key.

Both are single statements on SQLite and PostgreSQL (ON CONFLICT). Other
dialects fall back to a SAVEPOINT around the insert and treat a uniqueness
violation as "row already there". Uniqueness constraints on the key columns
are what make these safe under concurrent requests.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Tuple, Type

from sqlalchemy import and_, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.core.errors import StorageError

logger = logging.getLogger(__name__)

_NATIVE_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


def _key_clause(model: Type[Base], key: Dict[str, Any]):
    return and_(*(getattr(model, column) == value for column, value in key.items()))


@asynccontextmanager
async def storage_errors(action: str) -> AsyncIterator[None]:
    """Re-raise SQLAlchemy failures as StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database error while trying to {action}: {e}")
        raise StorageError("Database error") from e


async def insert_if_absent(
    session: AsyncSession,
    model: Type[Base],
    key: Dict[str, Any],
    values: Dict[str, Any],
) -> Tuple[int, bool]:
    """
    Insert model(**key, **values) unless a row with this key exists.

    Args:
        session: Session the statements run in (not committed here)
        model: ORM class with a unique constraint over the key columns
        key: Column values forming the unique key
        values: Remaining column values, only used when inserting

    Returns:
        (id of the row holding this key, True if this call inserted it)
    """
    row = {**key, **values}
    native_insert = _NATIVE_INSERTS.get(_dialect_name(session))

    if native_insert is not None:
        stmt = native_insert(model).values(**row).on_conflict_do_nothing(
            index_elements=list(key)
        )
        result = await session.execute(stmt)
        created = result.rowcount == 1
    else:
        try:
            async with session.begin_nested():
                await session.execute(insert(model).values(**row))
            created = True
        except IntegrityError:
            created = False

    row_id = await session.scalar(select(model.id).where(_key_clause(model, key)))
    return row_id, created


async def upsert(
    session: AsyncSession,
    model: Type[Base],
    key: Dict[str, Any],
    values: Dict[str, Any],
) -> None:
    """Insert model(**key, **values), or overwrite `values` on the row with this key."""
    row = {**key, **values}
    native_insert = _NATIVE_INSERTS.get(_dialect_name(session))

    if native_insert is not None:
        stmt = native_insert(model).values(**row).on_conflict_do_update(
            index_elements=list(key),
            set_=values,
        )
        await session.execute(stmt)
        return

    try:
        async with session.begin_nested():
            await session.execute(insert(model).values(**row))
    except IntegrityError:
        await session.execute(
            update(model).where(_key_clause(model, key)).values(**values)
        )
