"""
Repositories module initialization
"""

from .person import PersonRepository, person_to_document, document_to_person

__all__ = [
    "PersonRepository",
    "person_to_document",
    "document_to_person",
]
