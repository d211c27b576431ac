"""
Dependencies module initialization
"""

from .person import get_person_repository, get_person_producer, get_person_service

__all__ = [
    "get_person_repository",
    "get_person_producer",
    "get_person_service",
]
