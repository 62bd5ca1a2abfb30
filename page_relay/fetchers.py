# page_relay/fetchers.py
"""
Fetchers module: one fetcher per output mode, each making a single upstream
call and always returning a page (an ErrorPage on failure).
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from page_relay.errors import normalize_error
from page_relay.logger import logger
from page_relay.models import ContentPage, ContentStatus, InfoPage, Page, Params, RawPage
from page_relay.upstream import UpstreamClient, UpstreamError, UpstreamResponse, decode_content

__all__ = ("Fetcher", "InfoFetcher", "RawFetcher", "ContentsFetcher")


class Fetcher(ABC):
    """Shared contract: ``fetch(params)`` never raises, it returns a page."""

    def __init__(self, client: UpstreamClient) -> None:
        self.client = client

    async def fetch(self, params: Params) -> Page:
        try:
            return await self._fetch(params)
        except UpstreamError as exc:
            logger.warning("Upstream %s failed: %s", params.url, exc)
            return normalize_error(exc)

    @abstractmethod
    async def _fetch(self, params: Params) -> Page:
        """Do the upstream call; UpstreamError is handled by :meth:`fetch`."""


class InfoFetcher(Fetcher):
    """Probes upstream with HEAD whatever the inbound method was."""

    async def _fetch(self, params: Params) -> Page:
        resp = await self.client.request(params.url, "HEAD")
        return InfoPage(
            url=params.url,
            content_length=_header_length(resp),
            http_code=resp.status,
        )


class RawFetcher(Fetcher):
    """Returns upstream bytes without decompression."""

    async def _fetch(self, params: Params) -> Page:
        resp = await self.client.request(params.url, params.request_method, raw=True)
        text = decode_content(resp.content, params.charset)
        content = resp.content if text is None else text.encode("utf-8")
        return RawPage(content=content, content_length=len(content))


class ContentsFetcher(Fetcher):
    """Returns decoded upstream text with a status block."""

    async def _fetch(self, params: Params) -> Page:
        resp = await self.client.request(params.url, params.request_method)
        text = decode_content(resp.content, params.charset)
        if text is None:
            text = resp.content.decode("utf-8", errors="replace")
        return ContentPage(
            contents=text,
            status=ContentStatus(
                url=params.url,
                content_type=resp.headers.get("Content-Type"),
                content_length=len(text.encode("utf-8")),
                http_code=resp.status,
            ),
        )


def _header_length(resp: UpstreamResponse) -> int:
    try:
        length = int(resp.headers.get("Content-Length", ""))
    except ValueError:
        return -1
    return length if length > 0 else -1
