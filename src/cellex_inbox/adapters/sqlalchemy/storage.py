"""SQLAlchemy adapter – SqlAlchemyKeyValueStorage."""
from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from cellex_inbox.kernel.errors import StorageError
from cellex_inbox.kernel.ports import KeyValueStorage


def _require_sqlalchemy() -> None:
    try:
        import sqlalchemy  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'cellex-inbox[sqlalchemy]' to use the SQLAlchemy adapter") from exc


class SqlAlchemyKeyValueStorage(KeyValueStorage):
    """Key-value storage in a single ``kv_store`` table (SQLite, Postgres, ...).

    ``set_many`` runs in one transaction, so paired collection writes are
    atomic on this backend.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: Any | None = None,
        table_name: str = "kv_store",
        **engine_kwargs: Any,
    ) -> None:
        _require_sqlalchemy()
        from sqlalchemy import Column, DateTime, MetaData, String, Table, Text
        from sqlalchemy.ext.asyncio import create_async_engine

        if engine is None and database_url is None:
            raise ValueError("Either 'database_url' or 'engine' is required")
        self._engine = engine or create_async_engine(database_url, **engine_kwargs)
        self._metadata = MetaData()
        self._table = Table(
            table_name,
            self._metadata,
            Column("key", String(255), primary_key=True),
            Column("value", Text, nullable=False),
            Column("updated_at", DateTime(timezone=True), nullable=False),
        )

    @property
    def table(self) -> Any:
        return self._table

    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def get(self, key: str) -> str | None:
        from sqlalchemy import select
        from sqlalchemy.exc import SQLAlchemyError

        try:
            async with self._engine.connect() as conn:
                row = (await conn.execute(select(self._table.c.value).where(self._table.c.key == key))).first()
        except SQLAlchemyError as exc:
            raise StorageError("sqlalchemy", f"Could not read '{key}'", key=key, cause=exc) from exc
        return row[0] if row is not None else None

    async def set(self, key: str, value: str) -> None:
        await self.set_many({key: value})

    async def set_many(self, values: Mapping[str, str]) -> None:
        from sqlalchemy import insert, update
        from sqlalchemy.exc import SQLAlchemyError

        now = datetime.now(UTC)
        try:
            async with self._engine.begin() as conn:
                for key, value in values.items():
                    result = await conn.execute(
                        update(self._table)
                        .where(self._table.c.key == key)
                        .values(value=value, updated_at=now)
                    )
                    if result.rowcount == 0:
                        await conn.execute(insert(self._table).values(key=key, value=value, updated_at=now))
        except SQLAlchemyError as exc:
            raise StorageError("sqlalchemy", f"Could not write {sorted(values)}", cause=exc) from exc

    async def delete(self, key: str) -> None:
        from sqlalchemy import delete
        from sqlalchemy.exc import SQLAlchemyError

        try:
            async with self._engine.begin() as conn:
                await conn.execute(delete(self._table).where(self._table.c.key == key))
        except SQLAlchemyError as exc:
            raise StorageError("sqlalchemy", f"Could not delete '{key}'", key=key, cause=exc) from exc

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemyKeyValueStorage"]
