"""
Person Producer
Publishes person records to the configured output destination
"""

from person_service.core.logger import logger
from person_service.messaging.bindings import StreamBindings
from person_service.messaging.i_message_broker import IMessageBroker
from person_service.middleware.correlation_id import get_correlation_id
from person_service.models.person import Person


class PersonProducer:
    """Publisher for the person stream"""

    def __init__(self, broker: IMessageBroker, bindings: StreamBindings):
        self.broker = broker
        self.bindings = bindings

    async def publish(self, person: Person) -> bool:
        """
        Publish a person to the output topic, keyed by email.

        Returns:
            bool: True once the broker accepted the message, False otherwise.
            Consumer-side persistence is not awaited.
        """
        topic = self.bindings.output_topic
        correlation_id = get_correlation_id()

        headers = {}
        if correlation_id:
            headers["correlationId"] = correlation_id

        try:
            await self.broker.publish(
                topic,
                person.to_payload(),
                key=person.email,
                headers=headers,
            )
        except Exception as e:
            logger.error(
                f"Failed to publish person to topic '{topic}'",
                error=e,
                metadata={"event": "publish_person_error", "topic": topic, "email": person.email}
            )
            return False

        logger.info(
            f"Published person to topic '{topic}'",
            metadata={"event": "publish_person", "topic": topic, "email": person.email}
        )
        return True
