"""
In-Memory Broker Implementation
Delivers messages through per-topic asyncio queues inside a single process.
Used for local development without Kafka and for end-to-end tests.
"""

import asyncio
import copy
import logging
from typing import Any, Dict, Optional, Tuple

from .i_message_broker import IMessageBroker, MessageHandler

logger = logging.getLogger(__name__)

Envelope = Tuple[Dict[str, Any], Optional[str], Dict[str, str]]


class InMemoryBroker(IMessageBroker):
    """asyncio.Queue backed implementation of IMessageBroker"""

    def __init__(self):
        self.queues: Dict[str, "asyncio.Queue[Envelope]"] = {}
        self.connected = False
        self.messages_published = 0
        self.messages_consumed = 0
        self.messages_failed = 0

    def _queue(self, topic: str) -> "asyncio.Queue[Envelope]":
        if topic not in self.queues:
            self.queues[topic] = asyncio.Queue()
        return self.queues[topic]

    async def connect(self) -> None:
        self.connected = True
        logger.info("In-memory broker connected")

    async def publish(
        self,
        topic: str,
        value: Dict[str, Any],
        key: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        if not self.connected:
            raise ConnectionError("In-memory broker is not connected")

        # Consumers must not observe later mutations of the producer's dict
        await self._queue(topic).put((copy.deepcopy(value), key, dict(headers or {})))
        self.messages_published += 1

    async def consume(self, topic: str, handler: MessageHandler) -> None:
        queue = self._queue(topic)
        logger.info(f"In-memory consumer started: topic={topic}")

        while True:
            payload, _key, headers = await queue.get()
            try:
                await handler(payload, headers.get("correlationId"))
                self.messages_consumed += 1
            except Exception as e:
                self.messages_failed += 1
                logger.error(f"Error processing in-memory message: {e}")
            finally:
                queue.task_done()

    async def drain(self, topic: str) -> None:
        """Wait until every message published to topic has been handled"""
        await self._queue(topic).join()

    async def disconnect(self) -> None:
        self.connected = False
        logger.info("In-memory broker closed")

    def is_healthy(self) -> bool:
        return self.connected

    async def get_stats(self) -> Dict[str, Any]:
        return {
            "broker": "memory",
            "status": "connected" if self.connected else "disconnected",
            "pending": {topic: q.qsize() for topic, q in self.queues.items()},
            "messagesPublished": self.messages_published,
            "messagesConsumed": self.messages_consumed,
            "messagesFailed": self.messages_failed,
        }
