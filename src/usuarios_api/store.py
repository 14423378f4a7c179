"""Record store gateway for the ``usuarios`` table.

Each call checks one session out of the pool, runs a single statement,
commits and hands the connection back. Driver and SQLAlchemy failures are
reported as ``StoreError``; a call that exceeds the timeout is reported as
``StoreTimeoutError``.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .errors import StoreError, StoreTimeoutError
from .models import Usuario
from .schemas import UserFields, UserUpdate, WithPhoto, WithoutPhoto

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _driver_message(exc: BaseException) -> str:
    """Prefer the DBAPI's own message over SQLAlchemy's wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class UserStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: float | None = 10.0,
    ):
        self._session_factory = session_factory
        self._timeout = timeout

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(call(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Store %s timed out after %ss", operation, self._timeout)
            raise StoreTimeoutError(
                f"Store {operation} timed out after {self._timeout}s", cause=exc
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            message = _driver_message(exc)
            logger.error("Store %s failed: %s", operation, message)
            raise StoreError(message, cause=exc) from exc

    async def list_all(self) -> Sequence[Usuario]:
        async def call() -> Sequence[Usuario]:
            async with self._session_factory() as session:
                return (
                    await session.execute(select(Usuario).order_by(Usuario.id))
                ).scalars().all()

        return await self._run("list", call)

    async def insert(self, fields: UserFields, foto: str | None = None) -> int:
        """Insert a row and return the id the store assigned to it."""

        async def call() -> int:
            async with self._session_factory() as session:
                usuario = Usuario(
                    nombre=fields.nombre,
                    email=fields.email,
                    telefono=fields.telefono,
                    foto=foto,
                )
                session.add(usuario)
                await session.commit()
                return usuario.id

        return await self._run("insert", call)

    async def update_by_id(self, user_id: int, change: UserUpdate) -> int:
        """Apply ``change`` to row ``user_id`` and return the affected row count.

        ``WithPhoto`` and ``WithoutPhoto`` map to two different statements; the
        one without a photo never names the ``foto`` column, so an existing URL
        survives it.
        """
        if isinstance(change, WithPhoto):
            return await self._update_with_photo(user_id, change)
        if isinstance(change, WithoutPhoto):
            return await self._update_without_photo(user_id, change)
        raise TypeError(f"Unsupported update: {type(change).__name__}")

    async def _update_with_photo(self, user_id: int, change: WithPhoto) -> int:
        stmt = (
            update(Usuario)
            .where(Usuario.id == user_id)
            .values(
                nombre=change.fields.nombre,
                email=change.fields.email,
                telefono=change.fields.telefono,
                foto=change.foto,
            )
        )
        return await self._run("update", lambda: self._execute("update", stmt))

    async def _update_without_photo(self, user_id: int, change: WithoutPhoto) -> int:
        stmt = (
            update(Usuario)
            .where(Usuario.id == user_id)
            .values(
                nombre=change.fields.nombre,
                email=change.fields.email,
                telefono=change.fields.telefono,
            )
        )
        return await self._run("update", lambda: self._execute("update", stmt))

    async def delete_by_id(self, user_id: int) -> int:
        """Delete row ``user_id``. A missing row is not an error."""
        stmt = delete(Usuario).where(Usuario.id == user_id)
        return await self._run("delete", lambda: self._execute("delete", stmt))

    async def _execute(self, operation: str, stmt) -> int:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            logger.debug("Store %s affected %d row(s)", operation, result.rowcount)
            return result.rowcount
