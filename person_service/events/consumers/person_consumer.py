"""
Person Consumer
Persists person records received on the input destination
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from person_service.core.logger import logger
from person_service.messaging.bindings import StreamBindings
from person_service.messaging.i_message_broker import IMessageBroker
from person_service.middleware.correlation_id import correlation_scope
from person_service.models.person import Person
from person_service.repositories.person import PersonRepository


class PersonConsumer:
    """Consumer that upserts every inbound person into the repository"""

    def __init__(self, broker: IMessageBroker, repository: PersonRepository, bindings: StreamBindings):
        self.broker = broker
        self.repository = repository
        self.bindings = bindings

    async def handle_person(self, payload: Dict[str, Any], correlation_id: Optional[str] = None) -> None:
        """
        Handle one inbound message.

        Invalid payloads are logged and skipped. Store errors are logged and
        re-raised so the broker loop records the failure.
        """
        with correlation_scope(correlation_id):
            try:
                person = Person.model_validate(payload)
            except ValidationError as e:
                logger.error(
                    "Discarding invalid person message",
                    metadata={
                        "event": "invalid_person_message",
                        "topic": self.bindings.input_topic,
                        "errors": e.errors(include_url=False, include_context=False),
                    }
                )
                return

            try:
                await self.repository.save(person)
            except Exception as e:
                logger.error(
                    "Failed to persist person",
                    error=e,
                    metadata={"event": "persist_person_error", "email": person.email}
                )
                raise

            logger.info(
                "Persisted person",
                metadata={"event": "persist_person", "email": person.email}
            )

    async def run(self) -> None:
        """Consume the input topic until cancelled"""
        logger.info(
            f"Person consumer subscribing to '{self.bindings.input_topic}'",
            metadata={"topic": self.bindings.input_topic, "groupId": self.bindings.group_id}
        )
        await self.broker.consume(self.bindings.input_topic, self.handle_person)
