# page_relay/models.py
"""
Data models for the PageRelay pipeline: request parameters and page variants.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

REQUEST_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
DEFAULT_FORMAT = "json"


@dataclass(frozen=True, slots=True)
class Params:
    """Parameters of one inbound request, derived once and never mutated."""

    request_method: str = "GET"
    format: str = DEFAULT_FORMAT
    url: Optional[str] = None
    charset: Optional[str] = None
    callback: Optional[str] = None
    disable_cache: bool = False
    cache_max_age: Optional[float] = None


@dataclass(slots=True)
class InfoPage:
    """Upstream metadata gathered by a HEAD probe."""

    url: Optional[str]
    content_length: int
    http_code: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "content_length": self.content_length,
            "http_code": self.http_code,
        }


@dataclass(slots=True)
class RawPage:
    """Upstream body bytes, returned to the client verbatim."""

    content: bytes
    content_length: int


@dataclass(slots=True)
class ContentStatus:
    url: Optional[str]
    content_type: Optional[str]
    content_length: int
    http_code: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "content_type": self.content_type,
            "content_length": self.content_length,
            "http_code": self.http_code,
        }


@dataclass(slots=True)
class ContentPage:
    """Decoded upstream body plus a status block."""

    contents: str
    status: ContentStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"contents": self.contents, "status": self.status.to_dict()}


@dataclass(slots=True)
class TransportErrorStatus:
    """Status block when no upstream response exists."""

    error: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": dict(self.error)}


@dataclass(slots=True)
class HttpErrorStatus:
    """Status block when upstream answered with a failure status."""

    url: Optional[str]
    http_code: int
    content_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "http_code": self.http_code,
            "content_length": self.content_length,
        }


@dataclass(slots=True)
class ErrorPage:
    """Uniform shape for any failed upstream call."""

    contents: Optional[str]
    status: Union[TransportErrorStatus, HttpErrorStatus]

    def to_dict(self) -> Dict[str, Any]:
        return {"contents": self.contents, "status": self.status.to_dict()}


Page = Union[InfoPage, RawPage, ContentPage, ErrorPage]

__all__ = [
    "REQUEST_METHODS",
    "DEFAULT_FORMAT",
    "Params",
    "InfoPage",
    "RawPage",
    "ContentStatus",
    "ContentPage",
    "TransportErrorStatus",
    "HttpErrorStatus",
    "ErrorPage",
    "Page",
]
