"""Dialect-aware statements shared by repositories."""

from typing import Any

from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


async def insert_ignoring_conflict(
    session: AsyncSession,
    model: type,
    values: dict[str, Any],
    conflict_columns: list[str],
) -> bool:
    """Insert a row unless one with the same unique key already exists.

    Two callers inserting the same key concurrently both succeed; the row
    exists exactly once afterwards.

    Args:
        session: Session whose transaction the insert joins.
        model: Mapped model class.
        values: Column values for the new row.
        conflict_columns: Columns of the unique constraint guarding the row.

    Returns:
        True if a row was inserted, False if it already existed.
    """
    dialect = session.bind.dialect.name if session.bind is not None else ""
    if dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values).on_conflict_do_nothing(
            index_elements=conflict_columns
        )
    elif dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values).on_conflict_do_nothing(
            index_elements=conflict_columns
        )
    else:
        stmt = insert(model).values(**values)

    result = await session.execute(stmt)
    return bool(result.rowcount)
