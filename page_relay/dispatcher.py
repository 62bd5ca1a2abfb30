# File: page_relay/dispatcher.py
"""page_relay.dispatcher: выбор режима выдачи и соответствующего fetcher."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Type

from page_relay.fetchers import ContentsFetcher, Fetcher, InfoFetcher, RawFetcher
from page_relay.logger import logger
from page_relay.models import Page, Params
from page_relay.upstream import UpstreamClient

__all__ = ["Mode", "select_mode", "get_page"]


class Mode(Enum):
    INFO = "info"
    RAW = "raw"
    CONTENTS = "contents"


_FETCHERS: Dict[Mode, Type[Fetcher]] = {
    Mode.INFO: InfoFetcher,
    Mode.RAW: RawFetcher,
    Mode.CONTENTS: ContentsFetcher,
}


def select_mode(format: str, request_method: str) -> Mode:
    """HEAD всегда даёт INFO, затем info/raw по формату, иначе CONTENTS."""
    if request_method == "HEAD" or format == "info":
        return Mode.INFO
    if format == "raw":
        return Mode.RAW
    return Mode.CONTENTS


async def get_page(params: Params, client: UpstreamClient) -> Page:
    """Запускает fetcher выбранного режима и возвращает страницу."""
    mode = select_mode(params.format, params.request_method)
    logger.debug("Dispatch %s %s -> %s", params.request_method, params.url, mode.value)
    return await _FETCHERS[mode](client).fetch(params)
