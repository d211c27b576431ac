"""
Message Broker Factory
Creates the appropriate message broker instance based on configuration
"""

import logging

from person_service.core.config import Config

from .i_message_broker import IMessageBroker
from .kafka_broker import KafkaBroker
from .memory_broker import InMemoryBroker

logger = logging.getLogger(__name__)


class MessageBrokerFactory:
    """Factory for creating message broker instances"""

    @staticmethod
    def create(settings: Config) -> IMessageBroker:
        """
        Create a message broker instance based on MESSAGE_BROKER_TYPE

        Returns:
            IMessageBroker implementation
        """
        broker_type = settings.message_broker_type.lower()

        logger.info(f"Creating message broker: {broker_type}")

        if broker_type == "kafka":
            return KafkaBroker(
                brokers=settings.kafka_brokers,
                group_id=settings.kafka_group_id,
                auto_offset_reset=settings.kafka_auto_offset_reset,
                client_id=settings.service_name,
            )

        elif broker_type == "memory":
            return InMemoryBroker()

        else:
            raise ValueError(
                f"Unsupported message broker type: {broker_type}. "
                f"Supported types: kafka, memory"
            )
