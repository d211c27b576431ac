"""
Person repository - keyed record store backed by a MongoDB collection
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from person_service.core.errors import ErrorResponse
from person_service.core.logger import logger
from person_service.models.person import Person


def person_to_document(person: Person) -> dict:
    """Map a Person onto its stored document; the email is the document key"""
    return {
        "_id": person.email,
        "firstName": person.first_name,
        "lastName": person.last_name,
        "yearBirth": person.year_birth,
    }


def document_to_person(doc: dict) -> Person:
    """Map a stored document back onto a Person"""
    return Person(
        email=doc["_id"],
        first_name=doc.get("firstName"),
        last_name=doc.get("lastName"),
        year_birth=doc.get("yearBirth", 0),
    )


class PersonRepository:
    """Repository for person data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def save(self, person: Person) -> None:
        """Insert or overwrite the record stored under the person's email"""
        try:
            await self.collection.replace_one(
                {"_id": person.email},
                person_to_document(person),
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(
                "MongoDB error saving person",
                error=e,
                metadata={"event": "save_person_error", "email": person.email}
            )
            raise ErrorResponse("Database error during person save", status_code=503)

    async def find_by_email(self, email: str) -> Optional[Person]:
        """Point lookup by email"""
        try:
            doc = await self.collection.find_one({"_id": email})
        except PyMongoError as e:
            logger.error(
                "MongoDB error getting person",
                error=e,
                metadata={"event": "find_person_error", "email": email}
            )
            raise ErrorResponse("Database error during person retrieval", status_code=503)

        return document_to_person(doc) if doc else None

    async def delete(self, email: str) -> bool:
        """Remove the record stored under email; returns whether one existed"""
        try:
            result = await self.collection.delete_one({"_id": email})
        except PyMongoError as e:
            logger.error(
                "MongoDB error deleting person",
                error=e,
                metadata={"event": "delete_person_error", "email": email}
            )
            raise ErrorResponse("Database error during person deletion", status_code=503)

        return result.deleted_count > 0
