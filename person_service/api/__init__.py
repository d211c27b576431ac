"""
API module initialization
"""

from . import person, health

__all__ = ["person", "health"]
