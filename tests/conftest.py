# File: tests/conftest.py
import gzip
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from page_relay.config import RelayConfig
from page_relay.server import create_app

BINARY_BODY = bytes(range(256))
CP1251_TEXT = "привет"
GZIP_TEXT = b"compressed payload"


@dataclass
class UpstreamStub:
    """Running upstream test server plus the methods it has received."""

    server: TestServer
    methods: List[str] = field(default_factory=list)

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))


@pytest.fixture()
def relay_config() -> RelayConfig:
    """
    Return a RelayConfig with a short upstream timeout.
    """
    return RelayConfig(timeout=5.0, user_agent="TestAgent/1.0")


@pytest_asyncio.fixture
async def upstream() -> AsyncIterator[UpstreamStub]:
    app = web.Application()
    stub = UpstreamStub(server=TestServer(app))

    async def handle_text(request):
        stub.methods.append(request.method)
        return web.Response(text="hello world", content_type="text/plain")

    async def handle_binary(request):
        stub.methods.append(request.method)
        return web.Response(body=BINARY_BODY, content_type="application/octet-stream")

    async def handle_cp1251(request):
        stub.methods.append(request.method)
        return web.Response(body=CP1251_TEXT.encode("cp1251"), content_type="text/plain")

    async def handle_gzip(request):
        stub.methods.append(request.method)
        return web.Response(
            body=gzip.compress(GZIP_TEXT),
            headers={"Content-Encoding": "gzip", "Content-Type": "text/plain"},
        )

    async def handle_sized(request):
        stub.methods.append(request.method)
        return web.Response(body=b"x" * 42, content_type="text/plain")

    async def handle_missing(request):
        stub.methods.append(request.method)
        return web.Response(status=404, text="not here")

    async def handle_echo(request):
        stub.methods.append(request.method)
        return web.Response(text=request.method, content_type="text/plain")

    app.router.add_get("/text", handle_text)
    app.router.add_get("/binary", handle_binary)
    app.router.add_get("/cp1251", handle_cp1251)
    app.router.add_get("/gzip", handle_gzip)
    app.router.add_get("/sized", handle_sized)
    app.router.add_get("/missing", handle_missing)
    app.router.add_route("*", "/echo", handle_echo)

    await stub.server.start_server()
    try:
        yield stub
    finally:
        await stub.server.close()


@pytest_asyncio.fixture
async def relay(relay_config: RelayConfig) -> AsyncIterator[TestClient]:
    client = TestClient(TestServer(create_app(relay_config)))
    await client.start_server()
    try:
        yield client
    finally:
        await client.close()
