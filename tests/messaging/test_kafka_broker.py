"""Unit tests for the aiokafka-backed broker"""
import json
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from person_service.messaging.kafka_broker import KafkaBroker, _serialize_key, _serialize_value


class FakeConsumer:
    """Async-iterable stand-in for AIOKafkaConsumer"""

    def __init__(self, messages):
        self.messages = messages
        self.start = AsyncMock()
        self.stop = AsyncMock()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message


def kafka_message(value: bytes, headers=None, offset=0):
    return SimpleNamespace(topic="person", partition=0, offset=offset, value=value, headers=headers or [])


@pytest.fixture
def broker():
    return KafkaBroker(brokers=["localhost:9092"], group_id="test-group")


class TestKafkaBrokerProducer:
    """Test producer lifecycle and publishing"""

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaProducer")
    async def test_connect_starts_producer(self, mock_producer_cls, broker):
        producer = MagicMock()
        producer.start = AsyncMock()
        mock_producer_cls.return_value = producer

        await broker.connect()

        producer.start.assert_awaited_once()
        kwargs = mock_producer_cls.call_args.kwargs
        assert kwargs["bootstrap_servers"] == ["localhost:9092"]
        assert kwargs["value_serializer"] is _serialize_value
        assert broker.is_healthy() is True

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaProducer")
    async def test_connect_failure_cleans_up(self, mock_producer_cls, broker):
        producer = MagicMock()
        producer.start = AsyncMock(side_effect=ConnectionError("no brokers"))
        producer.stop = AsyncMock()
        mock_producer_cls.return_value = producer

        with pytest.raises(ConnectionError):
            await broker.connect()

        producer.stop.assert_awaited_once()
        assert broker.is_healthy() is False

    @pytest.mark.asyncio
    async def test_publish_requires_connection(self, broker):
        with pytest.raises(RuntimeError):
            await broker.publish("person", {"email": "a@b.com"})

    @pytest.mark.asyncio
    async def test_publish_sends_and_waits(self, broker):
        broker.producer = MagicMock()
        broker.producer.send_and_wait = AsyncMock()

        await broker.publish("person", {"email": "a@b.com"}, key="a@b.com", headers={"correlationId": "c-1"})

        broker.producer.send_and_wait.assert_awaited_once_with(
            "person",
            value={"email": "a@b.com"},
            key="a@b.com",
            headers=[("correlationId", b"c-1")],
        )
        assert (await broker.get_stats())["messagesPublished"] == 1

    @pytest.mark.asyncio
    async def test_publish_without_headers(self, broker):
        broker.producer = MagicMock()
        broker.producer.send_and_wait = AsyncMock()

        await broker.publish("person", {"email": "a@b.com"})

        assert broker.producer.send_and_wait.call_args.kwargs["headers"] is None

    @pytest.mark.asyncio
    async def test_disconnect_stops_producer(self, broker):
        producer = MagicMock()
        producer.stop = AsyncMock()
        broker.producer = producer

        await broker.disconnect()

        producer.stop.assert_awaited_once()
        assert broker.is_healthy() is False


class TestKafkaBrokerConsumer:
    """Test the consume loop"""

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaConsumer")
    async def test_consume_decodes_and_dispatches(self, mock_consumer_cls, broker):
        payload = {"email": "a@b.com", "firstName": "Ada"}
        fake = FakeConsumer([
            kafka_message(json.dumps(payload).encode("utf-8"), headers=[("correlationId", b"c-9")]),
        ])
        mock_consumer_cls.return_value = fake
        handler = AsyncMock()

        await broker.consume("person", handler)

        handler.assert_awaited_once_with(payload, "c-9")
        fake.start.assert_awaited_once()
        fake.stop.assert_awaited_once()
        assert mock_consumer_cls.call_args.kwargs["group_id"] == "test-group"
        assert broker.consumers == {}

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaConsumer")
    async def test_bad_message_does_not_stop_loop(self, mock_consumer_cls, broker):
        fake = FakeConsumer([
            kafka_message(b"not json", offset=0),
            kafka_message(b'{"email": "a@b.com"}', offset=1),
        ])
        mock_consumer_cls.return_value = fake
        handler = AsyncMock()

        await broker.consume("person", handler)

        handler.assert_awaited_once_with({"email": "a@b.com"}, None)
        stats = await broker.get_stats()
        assert stats["messagesFailed"] == 1
        assert stats["messagesConsumed"] == 1

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaConsumer")
    async def test_undecodable_header_does_not_stop_loop(self, mock_consumer_cls, broker):
        fake = FakeConsumer([
            kafka_message(b'{"email": "a@b.com"}', headers=[("correlationId", b"\xff\xfe")], offset=0),
            kafka_message(b'{"email": "c@d.com"}', headers=[("correlationId", b"c-2")], offset=1),
        ])
        mock_consumer_cls.return_value = fake
        handler = AsyncMock()

        await broker.consume("person", handler)

        assert handler.await_count == 2
        handler.assert_awaited_with({"email": "c@d.com"}, "c-2")
        assert (await broker.get_stats())["messagesConsumed"] == 2

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaConsumer")
    async def test_null_header_value_is_ignored(self, mock_consumer_cls, broker):
        fake = FakeConsumer([
            kafka_message(b'{"email": "a@b.com"}', headers=[("correlationId", None)]),
        ])
        mock_consumer_cls.return_value = fake
        handler = AsyncMock()

        await broker.consume("person", handler)

        handler.assert_awaited_once_with({"email": "a@b.com"}, None)

    @pytest.mark.asyncio
    @patch("person_service.messaging.kafka_broker.AIOKafkaConsumer")
    async def test_handler_failure_does_not_stop_loop(self, mock_consumer_cls, broker):
        fake = FakeConsumer([
            kafka_message(b'{"email": "a@b.com"}', headers=[("correlationId", b"c-3")], offset=0),
            kafka_message(b'{"email": "c@d.com"}', offset=1),
        ])
        mock_consumer_cls.return_value = fake
        handler = AsyncMock(side_effect=[RuntimeError("store down"), None])

        await broker.consume("person", handler)

        assert handler.await_count == 2
        stats = await broker.get_stats()
        assert stats["messagesFailed"] == 1
        assert stats["messagesConsumed"] == 1


class TestSerializers:

    def test_value_serializer(self):
        assert json.loads(_serialize_value({"yearBirth": 1930})) == {"yearBirth": 1930}

    def test_key_serializer(self):
        assert _serialize_key("a@b.com") == b"a@b.com"
        assert _serialize_key(None) is None
