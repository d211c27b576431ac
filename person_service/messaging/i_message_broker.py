"""
Message Broker Interface
Defines the contract for all message broker implementations (Kafka, in-memory)
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

# handler(payload, correlation_id)
MessageHandler = Callable[[Dict[str, Any], Optional[str]], Awaitable[None]]


class IMessageBroker(ABC):
    """Abstract base class for message broker implementations"""

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the message broker
        """
        pass

    @abstractmethod
    async def publish(
        self,
        topic: str,
        value: Dict[str, Any],
        key: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Publish a JSON payload to a topic

        Returns once the broker has accepted the message; raises on failure.

        Args:
            topic: Destination topic
            value: JSON-serializable payload
            key: Optional partitioning key
            headers: Optional string headers (e.g. correlationId)
        """
        pass

    @abstractmethod
    async def consume(self, topic: str, handler: MessageHandler) -> None:
        """
        Consume messages from a topic until cancelled or disconnected

        Args:
            topic: Name of the topic to consume from
            handler: Async callback invoked with (payload, correlation_id)
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Close connection to the message broker
        """
        pass

    @abstractmethod
    def is_healthy(self) -> bool:
        """
        Check if the broker connection is healthy

        Returns:
            True if connected and ready, False otherwise
        """
        pass

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        """
        Get topic statistics (for monitoring)

        Returns:
            Dictionary with statistics
        """
        pass
