"""
Person service containing the create/read business flow
"""

from typing import Optional

from person_service.core.errors import ErrorResponse
from person_service.core.logger import logger
from person_service.events.publishers.person_producer import PersonProducer
from person_service.models.person import Person
from person_service.repositories.person import PersonRepository

PUBLISH_FAILED_MESSAGE = "fail to publish Person in topic"


class PersonService:
    """Service layer for person records.

    Writes only go through the producer; the repository is written by the
    stream consumer, so a read right after a create may not see it yet.
    """

    def __init__(self, repository: PersonRepository, producer: PersonProducer):
        self.repository = repository
        self.producer = producer

    async def create_person(self, person: Person) -> None:
        """Publish a person for asynchronous persistence"""
        published = await self.producer.publish(person)
        if not published:
            raise ErrorResponse(PUBLISH_FAILED_MESSAGE, status_code=500)

        logger.info(
            f"Accepted person {person.email}",
            metadata={"event": "create_person", "email": person.email}
        )

    async def get_person(self, email: str) -> Optional[Person]:
        """Get a person by email, or None when no record is stored"""
        person = await self.repository.find_by_email(email)

        logger.info(
            f"Fetched person {email}",
            metadata={"event": "get_person", "email": email, "found": person is not None}
        )

        return person
