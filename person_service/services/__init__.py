"""
Services module initialization
"""

from .person import PersonService, PUBLISH_FAILED_MESSAGE

__all__ = [
    "PersonService",
    "PUBLISH_FAILED_MESSAGE",
]
