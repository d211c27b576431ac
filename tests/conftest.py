"""Shared test fixtures"""
import os

# Must be set before person_service.core.config is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("MESSAGE_BROKER_TYPE", "memory")
os.environ.setdefault("LOG_TO_FILE", "false")

from typing import Dict, Optional

import pytest
from unittest.mock import AsyncMock

from person_service.messaging.bindings import StreamBindings
from person_service.models.person import Person
from person_service.repositories.person import document_to_person, person_to_document


class InMemoryPersonRepository:
    """Dict-backed stand-in for PersonRepository that keeps the document mapping"""

    def __init__(self):
        self.documents: Dict[str, dict] = {}

    async def save(self, person: Person) -> None:
        doc = person_to_document(person)
        self.documents[doc["_id"]] = doc

    async def find_by_email(self, email: str) -> Optional[Person]:
        doc = self.documents.get(email)
        return document_to_person(doc) if doc else None

    async def delete(self, email: str) -> bool:
        return self.documents.pop(email, None) is not None


@pytest.fixture
def dijkstra_payload():
    """Person JSON as posted by clients"""
    return {
        "email": "edsger.dijkstra@company.com",
        "firstName": "Edsger",
        "lastName": "Dijkstra",
        "yearBirth": 1930,
    }


@pytest.fixture
def dijkstra(dijkstra_payload):
    return Person.model_validate(dijkstra_payload)


@pytest.fixture
def mock_collection():
    """Mock MongoDB collection for testing"""
    return AsyncMock()


@pytest.fixture
def memory_repository():
    return InMemoryPersonRepository()


@pytest.fixture
def bindings():
    return StreamBindings(output_topic="person-out", input_topic="person-in", group_id="test-group")
