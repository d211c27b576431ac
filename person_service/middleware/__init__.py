"""
Middleware modules for the Person Service
"""

from .correlation_id import (
    CorrelationIdMiddleware,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)

__all__ = ["CorrelationIdMiddleware", "correlation_scope", "get_correlation_id", "set_correlation_id"]
