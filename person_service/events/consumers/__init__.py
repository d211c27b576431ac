"""
Event consumers
"""

from .person_consumer import PersonConsumer

__all__ = ["PersonConsumer"]
