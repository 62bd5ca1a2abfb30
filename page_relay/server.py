# File: page_relay/server.py
"""page_relay.server: aiohttp-приложение ретранслятора и его запуск."""

from __future__ import annotations

import time
from typing import AsyncIterator, Awaitable, Callable

from aiohttp import web

from page_relay.config import RelayConfig
from page_relay.dispatcher import get_page
from page_relay.logger import logger
from page_relay.params import parse_params
from page_relay.response import build_response
from page_relay.upstream import UpstreamClient

__all__ = ["CONFIG_KEY", "UPSTREAM_KEY", "process_request", "create_app", "run_server"]

CONFIG_KEY = web.AppKey("config", RelayConfig)
UPSTREAM_KEY = web.AppKey("upstream", UpstreamClient)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


async def process_request(request: web.Request) -> web.StreamResponse:
    """Обрабатывает один входящий запрос: params → page → response."""
    started_at = time.monotonic()
    params = parse_params(request)

    if params.request_method == "OPTIONS":
        return web.Response()

    page = await get_page(params, request.app[UPSTREAM_KEY])
    return build_response(page, params, started_at, request.app[CONFIG_KEY].cache)


@web.middleware
async def cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Добавляет CORS-заголовки ко всем ответам, включая preflight."""
    response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = request.app[CONFIG_KEY].cors_allow_origin
    if request.method.upper() == "OPTIONS":
        response.headers["Access-Control-Allow-Methods"] = "GET, HEAD, POST, PUT, DELETE, PATCH, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = request.headers.get(
            "Access-Control-Request-Headers", "*"
        )
    return response


async def _upstream_ctx(app: web.Application) -> AsyncIterator[None]:
    async with UpstreamClient(app[CONFIG_KEY]) as client:
        app[UPSTREAM_KEY] = client
        yield


def create_app(config: RelayConfig) -> web.Application:
    """Создаёт приложение с одним маршрутом на все методы и пути."""
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config
    app.cleanup_ctx.append(_upstream_ctx)
    app.router.add_route("*", "/{path_info:.*}", process_request)
    return app


def run_server(config: RelayConfig) -> None:
    """Запускает ретранслятор и блокирует до остановки."""
    logger.info("PageRelay listening on %s:%s", config.host, config.port)
    web.run_app(create_app(config), host=config.host, port=config.port, access_log=None, print=None)
