"""
Event publishers
"""

from .person_producer import PersonProducer

__all__ = ["PersonProducer"]
