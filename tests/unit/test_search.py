"""Unit tests for the debounced user search."""

from __future__ import annotations

import asyncio

import pytest

from terangabuild.services import SearchDebouncer


class RecordingService:
    """Stands in for DatabaseService, recording the queries that reach it."""

    def __init__(self, service):
        self.config = service.config
        self._service = service
        self.queries: list[str] = []

    async def search_users(self, query):
        self.queries.append(query)
        return await self._service.search_users(query)


@pytest.fixture
def recorder(service) -> RecordingService:
    return RecordingService(service)


class TestSearchDebouncer:
    @pytest.mark.asyncio
    async def test_only_last_query_is_searched(self, recorder):
        debouncer = SearchDebouncer(recorder, delay_seconds=0.01)

        first = asyncio.ensure_future(debouncer.submit("Fat"))
        await asyncio.sleep(0)
        second = await debouncer.submit("Fatou")

        assert await first is None
        assert [p.id for p in second] == ["demo-pro-1"]
        assert recorder.queries == ["Fatou"]

    @pytest.mark.asyncio
    async def test_short_query_resolves_immediately(self, recorder):
        debouncer = SearchDebouncer(recorder, delay_seconds=10)

        assert await asyncio.wait_for(debouncer.submit("fa"), timeout=1) == []
        assert recorder.queries == []

    @pytest.mark.asyncio
    async def test_short_query_cancels_pending_search(self, recorder):
        debouncer = SearchDebouncer(recorder, delay_seconds=0.01)

        pending = asyncio.ensure_future(debouncer.submit("Ibrahima"))
        await asyncio.sleep(0)
        assert await debouncer.submit("I") == []

        assert await pending is None
        assert recorder.queries == []

    @pytest.mark.asyncio
    async def test_cancel(self, recorder):
        debouncer = SearchDebouncer(recorder, delay_seconds=0.01)

        pending = asyncio.ensure_future(debouncer.submit("Moussa"))
        await asyncio.sleep(0)
        debouncer.cancel()

        assert await pending is None

    @pytest.mark.asyncio
    async def test_default_delay_from_config(self, recorder):
        assert SearchDebouncer(recorder).delay == 0.3
