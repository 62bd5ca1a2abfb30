# page_relay/upstream.py
"""
Upstream module: performs the single outbound HTTP call for a relayed request
and reports failures as typed exceptions.
"""
from __future__ import annotations

import asyncio
import codecs
from dataclasses import dataclass
from typing import Mapping, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_relay.config import RelayConfig
from page_relay.logger import logger

__all__ = (
    "UpstreamResponse",
    "UpstreamError",
    "TransportError",
    "UpstreamHTTPError",
    "UpstreamClient",
    "decode_content",
)


@dataclass(slots=True)
class UpstreamResponse:
    """Final URL, status, headers and body bytes of an upstream response."""

    url: str
    status: int
    headers: Mapping[str, str]
    content: bytes


class UpstreamError(Exception):
    """Base class for every failed upstream call."""


class TransportError(UpstreamError):
    """The call never produced a response (DNS, connect, timeout, bad URL)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class UpstreamHTTPError(UpstreamError):
    """Upstream answered, but with a status the relay treats as a failure."""

    def __init__(self, response: UpstreamResponse) -> None:
        super().__init__(f"upstream returned HTTP {response.status}")
        self.response = response


def decode_content(content: bytes, charset: Optional[str]) -> Optional[str]:
    """Decode *content* with *charset*; None when no charset or it is unknown."""
    if not charset:
        return None
    try:
        codec = codecs.lookup(charset)
        # base64, rot13, zlib and friends are registered codecs but not charsets
        if not getattr(codec, "_is_text_encoding", True):
            raise LookupError(f"{charset!r} is not a text encoding")
        return content.decode(codec.name, errors="replace")
    except LookupError:
        logger.debug("Unknown charset %r, passing content through", charset)
        return None


class UpstreamClient:
    """Owns the outbound sessions: one decompressing, one passing bytes as-is."""

    FAILURE_STATUS = 400

    def __init__(self, config: RelayConfig) -> None:
        self.config = config
        self.session: Optional[ClientSession] = None
        self.raw_session: Optional[ClientSession] = None

    async def __aenter__(self) -> UpstreamClient:
        timeout = ClientTimeout(total=self.config.timeout)
        headers = {"User-Agent": self.config.user_agent}
        self.session = ClientSession(timeout=timeout, headers=headers, raise_for_status=False)
        self.raw_session = ClientSession(
            timeout=timeout,
            headers=headers,
            raise_for_status=False,
            auto_decompress=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        for session in (self.session, self.raw_session):
            if session and not session.closed:
                await session.close()

    async def request(self, url: Optional[str], method: str = "GET", *, raw: bool = False) -> UpstreamResponse:
        """
        Issue exactly one upstream call.

        HEAD responses are returned whatever their status and without a body.
        Any other response with status >= 400 raises UpstreamHTTPError.
        """
        session = self.raw_session if raw else self.session
        if session is None:
            raise RuntimeError("Session not initialized")
        try:
            async with session.request(method, url or "", allow_redirects=True) as resp:
                content = b"" if method == "HEAD" else await resp.read()
                result = UpstreamResponse(str(resp.url), resp.status, resp.headers.copy(), content)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise TransportError(exc) from exc
        # HEAD feeds info mode, whose job is to report the upstream status code
        if method != "HEAD" and result.status >= self.FAILURE_STATUS:
            raise UpstreamHTTPError(result)
        return result
