# File: page_relay/params.py
"""page_relay.params: разбор входящего запроса в неизменяемый объект Params."""

from __future__ import annotations

import math
import re
from typing import Optional

from aiohttp import web

from page_relay.models import DEFAULT_FORMAT, REQUEST_METHODS, Params

__all__ = [
    "parse_params",
    "parse_request_method",
    "parse_format",
    "parse_charset",
    "parse_cache_max_age",
]

# символы имени кодировки по RFC 2978; попадает в заголовок Content-Type
_CHARSET_RE = re.compile(r"[A-Za-z0-9!#$%&'+\-^_`{}~.:]+")


def parse_request_method(method: Optional[str]) -> str:
    """Приводит метод к верхнему регистру; неизвестные методы считаются GET."""
    method = (method or "").upper()
    return method if method in REQUEST_METHODS else "GET"


def parse_format(path: str) -> str:
    """Формат — первый сегмент пути в нижнем регистре, по умолчанию json."""
    segment = path.lstrip("/").split("/", 1)[0]
    return (segment or DEFAULT_FORMAT).lower()


def parse_charset(value: Optional[str]) -> Optional[str]:
    """Имя кодировки или None, если оно пустое или содержит недопустимые символы."""
    if value and _CHARSET_RE.fullmatch(value):
        return value
    return None


def parse_cache_max_age(value: Optional[str]) -> Optional[float]:
    """Числовое значение cacheMaxAge; мусор, 0 и бесконечности дают None."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def parse_params(request: web.Request) -> Params:
    """Собирает Params из метода, пути и query-параметров запроса. Не падает."""
    query = request.query
    return Params(
        request_method=parse_request_method(request.method),
        format=parse_format(request.path),
        url=query.get("url"),
        charset=parse_charset(query.get("charset")),
        callback=query.get("callback") or None,
        disable_cache=bool(query.get("disableCache")),
        cache_max_age=parse_cache_max_age(query.get("cacheMaxAge")),
    )
