"""
Shared plumbing for repositories: every statement and flush is bounded by
the session's operation timeout.
"""

from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import run_with_timeout


class Repository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, statement: Any, operation: str) -> Result:
        return await run_with_timeout(self._session, self._session.execute(statement), operation)

    async def _flush(self, operation: str) -> None:
        await run_with_timeout(self._session, self._session.flush(), operation)
