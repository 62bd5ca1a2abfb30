# page_relay/response.py
"""
Response builder: turns a page and the request parameters into the outgoing
aiohttp response. The relay always answers 200; failures live in the payload.
"""
from __future__ import annotations

import json
import re
import time
from typing import Any, Dict, Optional

from aiohttp import web

from page_relay.config import CachePolicy
from page_relay.models import Page, Params, RawPage

__all__ = ["build_response", "cache_control", "jsonp_wrap", "elapsed_ms"]

_CACHEABLE_METHODS = ("GET", "HEAD")
_CALLBACK_UNSAFE_RE = re.compile(r"[^\[\]\w$.]")


def cache_control(params: Params, cache: CachePolicy) -> Optional[str]:
    """Cache-control value for GET/HEAD, None for every other method."""
    if params.request_method not in _CACHEABLE_METHODS:
        return None
    max_age = cache.max_age(params.cache_max_age, params.disable_cache)
    return f"public, max-age={max_age}, stale-if-error={cache.stale_if_error}"


def jsonp_wrap(callback: str, payload: str) -> str:
    """Wrap *payload* as ``callback(payload)``; unsafe callback chars are dropped."""
    name = _CALLBACK_UNSAFE_RE.sub("", callback)
    return f"{name}({payload})"


def elapsed_ms(started_at: float, finished_at: Optional[float] = None) -> int:
    if finished_at is None:
        finished_at = time.monotonic()
    return int((finished_at - started_at) * 1000)


def build_response(
    page: Page,
    params: Params,
    started_at: float,
    cache: CachePolicy,
    finished_at: Optional[float] = None,
) -> web.Response:
    """
    Assemble the outgoing response.

    *started_at* and *finished_at* are ``time.monotonic()`` readings; when
    *finished_at* is omitted the current clock is used.
    """
    headers: Dict[str, str] = {}
    cache_header = cache_control(params, cache)
    if cache_header is not None:
        headers["Cache-control"] = cache_header

    if params.format == "raw" and isinstance(page, RawPage):
        headers["Content-Length"] = str(page.content_length)
        return web.Response(body=page.content, headers=headers)

    headers["Content-Type"] = f"application/json; charset={params.charset or 'utf-8'}"

    data: Dict[str, Any] = page.to_dict()
    response_time = elapsed_ms(started_at, finished_at)
    if isinstance(data.get("status"), dict):
        data["status"]["response_time"] = response_time
    else:
        data["response_time"] = response_time

    payload = json.dumps(data)
    if params.callback:
        payload = jsonp_wrap(params.callback, payload)
    return web.Response(body=payload.encode("utf-8"), headers=headers)
