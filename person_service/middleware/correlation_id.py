"""
Correlation IDs for HTTP requests and consumed messages.

The id lives in a ContextVar so the structured logger picks it up from any
coroutine handling the request or message. ``correlation_scope`` binds an id
for one unit of work and restores the previous value afterwards.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from person_service.core.config import config

MAX_CORRELATION_ID_LENGTH = 128

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    return correlation_id_ctx.get()


def set_correlation_id(correlation_id: Optional[str]) -> None:
    correlation_id_ctx.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: Optional[str]) -> Iterator[Optional[str]]:
    """Bind correlation_id to the current context until the block exits"""
    token = correlation_id_ctx.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_ctx.reset(token)


def resolve_correlation_id(incoming: Optional[str]) -> str:
    """
    Use the caller's id when it is usable, otherwise mint a new one.

    Blank values and values longer than MAX_CORRELATION_ID_LENGTH are replaced.
    """
    if incoming is not None:
        incoming = incoming.strip()
        if incoming and len(incoming) <= MAX_CORRELATION_ID_LENGTH:
            return incoming
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to each request, its logs and its response"""

    async def dispatch(self, request: Request, call_next):
        correlation_id = resolve_correlation_id(request.headers.get(config.correlation_id_header))
        request.state.correlation_id = correlation_id

        with correlation_scope(correlation_id):
            response = await call_next(request)

        response.headers[config.correlation_id_header] = correlation_id
        return response
