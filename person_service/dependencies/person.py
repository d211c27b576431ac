"""
Dependency injection for the Person service, repository and producer
"""

from fastapi import Depends

from person_service.core.config import config
from person_service.db.mongodb import get_person_collection
from person_service.events.publishers.person_producer import PersonProducer
from person_service.messaging.broker import get_broker
from person_service.repositories.person import PersonRepository
from person_service.services.person import PersonService


async def get_person_repository() -> PersonRepository:
    """Get person repository instance"""
    collection = await get_person_collection()
    return PersonRepository(collection)


async def get_person_producer() -> PersonProducer:
    """Get person producer bound to the configured output topic"""
    broker = await get_broker()
    return PersonProducer(broker, config.stream_bindings)


async def get_person_service(
    repository: PersonRepository = Depends(get_person_repository),
    producer: PersonProducer = Depends(get_person_producer),
) -> PersonService:
    """Get person service instance"""
    return PersonService(repository, producer)
