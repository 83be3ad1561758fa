"""Debounced user search.

Each keystroke submits the current query; a search only reaches the facade
once input has been idle for ``debounce_seconds``. Superseded submissions
resolve to None.
"""

from __future__ import annotations

import asyncio

import structlog

from terangabuild.models import Profile
from terangabuild.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class SearchDebouncer:
    """Collapse rapid successive searches into the last one.

    Example:
        >>> debouncer = SearchDebouncer(service)
        >>> first = asyncio.create_task(debouncer.submit("Fat"))
        >>> results = await debouncer.submit("Fatou")  # first resolves to None
    """

    def __init__(self, service: DatabaseService, delay_seconds: float | None = None):
        self.service = service
        self.delay = service.config.search.debounce_seconds if delay_seconds is None else delay_seconds
        self._pending: asyncio.Task | None = None

    async def submit(self, query: str) -> list[Profile] | None:
        """Search for ``query`` once input settles.

        Returns:
            Matching profiles, [] for queries below the minimum length, or
            None when a later submit superseded this one
        """
        self.cancel()
        if len(query.strip()) < self.service.config.search.min_query_length:
            return []

        task = asyncio.ensure_future(self._search_later(query))
        self._pending = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._pending is task:
                self._pending = None

        if task.cancelled():
            logger.debug("search_superseded", query=query)
            return None
        return task.result()

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _search_later(self, query: str) -> list[Profile]:
        await asyncio.sleep(self.delay)
        return await self.service.search_users(query)
