"""
Event publishing and consumption for the person stream
"""

from .publishers import PersonProducer
from .consumers import PersonConsumer

__all__ = [
    "PersonProducer",
    "PersonConsumer",
]
