from __future__ import annotations

import re
from contextlib import contextmanager, suppress
from typing import Any, Iterator, Mapping, Optional
from uuid import uuid4

import structlog
from flask import g

CORRELATION_HEADER = "X-Correlation-ID"
# Caller-supplied ids end up in every log line; reject anything unusual.
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _flask_correlation_id() -> Optional[str]:
    with suppress(RuntimeError):
        return getattr(g, "correlation_id", None)
    return None


def current_correlation_id() -> Optional[str]:
    """Correlation id of the running request or extraction, if any."""
    return _flask_correlation_id() or structlog.contextvars.get_contextvars().get(
        "correlation_id"
    )


def correlation_id_from_headers(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    if not headers:
        return None
    value = (headers.get(CORRELATION_HEADER) or "").strip()
    return value if _VALID_ID.match(value) else None


def ensure_correlation_id(value: Optional[str] = None) -> str:
    """Bind ``value`` (or the active id, or a fresh one) and return it."""
    correlation_id = value or current_correlation_id() or uuid4().hex
    with suppress(RuntimeError):
        g.correlation_id = correlation_id
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    return correlation_id


def bind_extraction_context(
    url: Optional[str] = None, *, endpoint: Optional[str] = None, **extra: Any
) -> None:
    """Attach the page URL and caller details to every following log event."""
    structlog.contextvars.bind_contextvars(url=url, endpoint=endpoint, **extra)


def clear_correlation_context() -> None:
    structlog.contextvars.clear_contextvars()
    with suppress(RuntimeError):
        g.pop("correlation_id", None)


@contextmanager
def correlation_scope(
    url: Optional[str] = None, correlation_id: Optional[str] = None, **extra: Any
) -> Iterator[str]:
    """Correlation context for work outside a Flask request (CLI runs, scripts)."""
    with structlog.contextvars.bound_contextvars(
        correlation_id=correlation_id or uuid4().hex, url=url, **extra
    ):
        yield structlog.contextvars.get_contextvars()["correlation_id"]


__all__ = [
    "CORRELATION_HEADER",
    "bind_extraction_context",
    "clear_correlation_context",
    "correlation_id_from_headers",
    "correlation_scope",
    "current_correlation_id",
    "ensure_correlation_id",
]
