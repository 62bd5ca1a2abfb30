# File: page_relay/errors.py
"""page_relay.errors: единственное место, где сбои upstream превращаются в ErrorPage."""

from __future__ import annotations

from page_relay.models import ErrorPage, HttpErrorStatus, TransportErrorStatus
from page_relay.upstream import TransportError, UpstreamError, UpstreamHTTPError

__all__ = ["normalize_error"]


def normalize_error(exc: UpstreamError) -> ErrorPage:
    """Преобразует сбой вызова upstream в ErrorPage; никогда не бросает исключений."""
    if isinstance(exc, UpstreamHTTPError):
        response = exc.response
        return ErrorPage(
            contents=response.content.decode("utf-8", errors="replace"),
            status=HttpErrorStatus(
                url=response.url,
                http_code=response.status,
                content_length=len(response.content),
            ),
        )

    cause = exc.cause if isinstance(exc, TransportError) else exc
    return ErrorPage(
        contents=None,
        status=TransportErrorStatus(
            error={"name": type(cause).__name__, "message": str(cause) or type(cause).__name__},
        ),
    )
