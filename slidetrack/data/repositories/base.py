"""
Shared SQL helpers for the repositories.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

from sqlalchemy import Table, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.domain.exceptions import ConflictError


@asynccontextmanager
async def conflict_guard(session: AsyncSession, what: str):
    """
    Run a write inside a savepoint and surface unique-constraint violations
    as ConflictError. The outer transaction stays usable afterwards.
    """
    try:
        async with session.begin_nested():
            yield
    except IntegrityError as exc:
        raise ConflictError(f"{what} violates a uniqueness constraint") from exc


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


async def insert_ignore(session: AsyncSession, table: Table, values: Dict[str, Any]) -> None:
    """INSERT .. ON CONFLICT DO NOTHING on the primary key of ``table``."""
    dialect = _dialect_name(session)

    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        await _insert_if_absent(session, table, values)
        return

    await session.execute(insert(table).values(**values).on_conflict_do_nothing())


async def _insert_if_absent(session: AsyncSession, table: Table, values: Dict[str, Any]) -> None:
    key = [col == values[col.name] for col in table.primary_key.columns]
    exists = await session.execute(select(1).select_from(table).where(*key))
    if exists.first() is not None:
        return
    try:
        async with session.begin_nested():
            await session.execute(table.insert().values(**values))
    except IntegrityError:
        # Lost the race to a concurrent insert of the same member
        pass
