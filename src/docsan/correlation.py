"""
Correlation ID tracking for request-scoped logging.

The HTTP service sets one correlation ID per request; log records and errors
raised while handling that request pick it up from the context variable.
"""

import contextvars

from docsan.exceptions import generate_correlation_id

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    """
    Generate a correlation ID and make it current.

    Returns:
        8-character correlation ID
    """
    corr_id = generate_correlation_id()
    _correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str | None:
    """Get the current correlation ID, or None if none has been set."""
    return _correlation_id.get()


def set_correlation_id(corr_id: str) -> contextvars.Token[str | None]:
    """
    Set a correlation ID in the current context.

    Args:
        corr_id: Correlation ID, e.g. from an incoming ``X-Correlation-ID`` header

    Returns:
        Token to restore the previous value with ``reset_correlation_id``
    """
    return _correlation_id.set(corr_id)


def reset_correlation_id(token: contextvars.Token[str | None]) -> None:
    """Restore the correlation ID that was current before ``set_correlation_id``."""
    _correlation_id.reset(token)
