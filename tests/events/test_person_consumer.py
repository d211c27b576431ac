"""Unit tests for PersonConsumer"""
import pytest
from unittest.mock import AsyncMock

from person_service.core.errors import ErrorResponse
from person_service.events.consumers.person_consumer import PersonConsumer
from person_service.middleware.correlation_id import get_correlation_id


class TestPersonConsumer:
    """Test handling of inbound person messages"""

    @pytest.mark.asyncio
    async def test_handle_person_saves_record(self, bindings, dijkstra, dijkstra_payload):
        repository = AsyncMock()
        consumer = PersonConsumer(AsyncMock(), repository, bindings)

        await consumer.handle_person(dijkstra_payload, "corr-1")

        repository.save.assert_awaited_once_with(dijkstra)

    @pytest.mark.asyncio
    async def test_correlation_id_bound_only_while_handling(self, bindings, dijkstra_payload):
        seen = []
        repository = AsyncMock()
        repository.save.side_effect = lambda person: seen.append(get_correlation_id())
        before = get_correlation_id()
        consumer = PersonConsumer(AsyncMock(), repository, bindings)

        await consumer.handle_person(dijkstra_payload, "corr-1")

        assert seen == ["corr-1"]
        assert get_correlation_id() == before

    @pytest.mark.asyncio
    async def test_invalid_payload_is_skipped(self, bindings):
        repository = AsyncMock()
        consumer = PersonConsumer(AsyncMock(), repository, bindings)

        await consumer.handle_person({"firstName": "No", "lastName": "Email"})

        repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_is_reraised(self, bindings, dijkstra_payload):
        repository = AsyncMock()
        repository.save.side_effect = ErrorResponse("Database error during person save", status_code=503)
        consumer = PersonConsumer(AsyncMock(), repository, bindings)

        with pytest.raises(ErrorResponse):
            await consumer.handle_person(dijkstra_payload)

    @pytest.mark.asyncio
    async def test_upsert_writes_latest(self, bindings, memory_repository, dijkstra_payload):
        consumer = PersonConsumer(AsyncMock(), memory_repository, bindings)

        await consumer.handle_person(dijkstra_payload)
        await consumer.handle_person(dict(dijkstra_payload, firstName="E. W."))

        stored = await memory_repository.find_by_email("edsger.dijkstra@company.com")
        assert stored.first_name == "E. W."

    @pytest.mark.asyncio
    async def test_run_subscribes_to_input_topic(self, bindings):
        broker = AsyncMock()
        consumer = PersonConsumer(broker, AsyncMock(), bindings)

        await consumer.run()

        broker.consume.assert_awaited_once_with("person-in", consumer.handle_person)
