"""
Kafka Broker Implementation
Implements the IMessageBroker interface for Apache Kafka using aiokafka
"""

import json
import logging
from typing import Any, Dict, List, Optional

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer

from .i_message_broker import IMessageBroker, MessageHandler

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "correlationId"


def _serialize_value(value: Dict[str, Any]) -> bytes:
    return json.dumps(value).encode("utf-8")


def _serialize_key(key: Optional[str]) -> Optional[bytes]:
    return key.encode("utf-8") if key is not None else None


def _decode_headers(raw_headers) -> Dict[str, str]:
    """Header values as text; undecodable bytes replaced, null values dropped"""
    return {
        name: raw.decode("utf-8", errors="replace")
        for name, raw in (raw_headers or [])
        if raw is not None
    }


class KafkaBroker(IMessageBroker):
    """Kafka implementation of IMessageBroker"""

    def __init__(
        self,
        brokers: List[str],
        group_id: str,
        auto_offset_reset: str = "earliest",
        client_id: str = "person-service",
    ):
        """
        Initialize Kafka broker

        Args:
            brokers: List of Kafka broker addresses
            group_id: Consumer group ID
            auto_offset_reset: Where a new consumer group starts reading
            client_id: Client name reported to the brokers
        """
        self.brokers = brokers
        self.group_id = group_id
        self.auto_offset_reset = auto_offset_reset
        self.client_id = client_id
        self.producer: Optional[AIOKafkaProducer] = None
        self.consumers: Dict[str, AIOKafkaConsumer] = {}
        self.messages_published = 0
        self.messages_consumed = 0
        self.messages_failed = 0

    async def connect(self) -> None:
        """Connect the producer to Kafka"""
        logger.info(f"Connecting to Kafka... brokers={self.brokers}, group_id={self.group_id}")

        producer = AIOKafkaProducer(
            bootstrap_servers=self.brokers,
            client_id=self.client_id,
            key_serializer=_serialize_key,
            value_serializer=_serialize_value,
        )
        try:
            await producer.start()
        except Exception:
            await producer.stop()
            raise

        self.producer = producer
        logger.info("Kafka producer started")

    async def publish(
        self,
        topic: str,
        value: Dict[str, Any],
        key: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """Send a message and wait for the broker acknowledgement"""
        if self.producer is None:
            raise RuntimeError("Kafka producer is not connected")

        kafka_headers = [(name, v.encode("utf-8")) for name, v in (headers or {}).items() if v is not None]

        await self.producer.send_and_wait(
            topic,
            value=value,
            key=key,
            headers=kafka_headers or None,
        )
        self.messages_published += 1

    async def consume(self, topic: str, handler: MessageHandler) -> None:
        """Start consuming messages from Kafka"""
        consumer = AIOKafkaConsumer(
            topic,
            bootstrap_servers=self.brokers,
            group_id=self.group_id,
            client_id=self.client_id,
            auto_offset_reset=self.auto_offset_reset,
        )
        await consumer.start()
        self.consumers[topic] = consumer
        logger.info(f"Kafka consumer started: topic={topic}, group_id={self.group_id}")

        try:
            async for message in consumer:
                correlation_id = None
                try:
                    correlation_id = _decode_headers(message.headers).get(CORRELATION_ID_HEADER)
                    payload = json.loads(message.value)
                    await handler(payload, correlation_id)
                    self.messages_consumed += 1
                except Exception as e:
                    self.messages_failed += 1
                    logger.error(
                        f"Error processing Kafka message: {e}",
                        extra={
                            "correlationId": correlation_id,
                            "metadata": {
                                "topic": message.topic,
                                "partition": message.partition,
                                "offset": message.offset,
                            },
                        },
                    )
        finally:
            self.consumers.pop(topic, None)
            await consumer.stop()
            logger.info(f"Kafka consumer stopped: topic={topic}")

    async def disconnect(self) -> None:
        """Close Kafka connections"""
        for consumer in list(self.consumers.values()):
            await consumer.stop()
        self.consumers.clear()

        if self.producer is not None:
            await self.producer.stop()
            self.producer = None
        logger.info("Kafka broker closed")

    def is_healthy(self) -> bool:
        """Check if broker connection is healthy"""
        return self.producer is not None

    async def get_stats(self) -> Dict[str, Any]:
        """Get Kafka statistics"""
        return {
            "broker": "kafka",
            "status": "connected" if self.is_healthy() else "disconnected",
            "brokers": self.brokers,
            "groupId": self.group_id,
            "subscriptions": sorted(self.consumers),
            "messagesPublished": self.messages_published,
            "messagesConsumed": self.messages_consumed,
            "messagesFailed": self.messages_failed,
        }
