"""
The aiohttp application of the Icinga dashboard.

A single catch-all route hands every request, whatever its method, to
:func:`dispatch`, which routes on the raw path. The shared Icinga client
session is opened when the application starts and closed when it stops.
"""

import logging
from typing import AsyncIterator, Mapping, Optional
from uuid import uuid4

from aiohttp import web
from aiohttp.typedefs import Handler

from icinga_dashboard import renderer
from icinga_dashboard.assets import StaticAsset
from icinga_dashboard.config.config_store import ConfigStore
from icinga_dashboard.config.http_config import get_http_session
from icinga_dashboard.config.logging_config import request_id_var
from icinga_dashboard.contracts import ObjectQueryClient
from icinga_dashboard.handler import TableQueryHandler
from icinga_dashboard.router import RouteKind, route
from icinga_dashboard.upstream.aiohttp_client import AiohttpIcingaClient

# Module logger
logger = logging.getLogger(__name__)

CONFIG_STORE_KEY = web.AppKey("config_store", ConfigStore)
ASSETS_KEY = web.AppKey("assets", Mapping[str, StaticAsset])
TABLE_HANDLER_KEY = web.AppKey("table_handler", TableQueryHandler)


@web.middleware
async def request_context_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """
    Tag the request with an ID for logging and guarantee a response.

    Exceptions escaping the handler are logged and answered with the
    fixed 500 response.
    """
    token = request_id_var.set(uuid4().hex[:8])
    try:
        return await handler(request)
    except Exception:
        logger.exception(f"Unhandled error while serving {request.method} {request.rel_url}")
        return renderer.internal_error_response()
    finally:
        request_id_var.reset(token)


def serve_static(assets: Mapping[str, StaticAsset], file_name: str) -> web.Response:
    asset = assets.get(file_name)
    if asset is None:
        return renderer.not_found_response()
    return web.Response(body=asset.body, content_type=asset.content_type)


async def dispatch(request: web.Request) -> web.Response:
    """Serve a request according to :func:`icinga_dashboard.router.route`."""
    target = route(request.rel_url.raw_path)

    if target.kind == RouteKind.INDEX:
        return renderer.safe_render(renderer.render_index)
    if target.kind == RouteKind.TABLE:
        table_handler = request.app[TABLE_HANDLER_KEY]
        return await table_handler.handle(request.rel_url.raw_query_string)
    if target.kind == RouteKind.STATIC and target.file_name is not None:
        return serve_static(request.app[ASSETS_KEY], target.file_name)
    return renderer.not_found_response()


async def _icinga_client_ctx(app: web.Application) -> AsyncIterator[None]:
    """Open the shared Icinga client session for the lifetime of the application."""
    config_store = app[CONFIG_STORE_KEY]
    api_config = (await config_store.snapshot()).icinga_api
    session = get_http_session(api_config)
    app[TABLE_HANDLER_KEY] = TableQueryHandler(config_store, AiohttpIcingaClient(session))
    logger.info(f"Icinga client configured for {api_config.base_url}")
    try:
        yield
    finally:
        await session.close()
        logger.info("Icinga client session closed.")


def create_app(
    config_store: ConfigStore,
    assets: Mapping[str, StaticAsset],
    client: Optional[ObjectQueryClient] = None,
) -> web.Application:
    """
    Build the dashboard application.

    Args:
        config_store: Store holding the active configuration.
        assets: Static assets served under ``/static/``.
        client: Icinga client to use. If omitted, an aiohttp-based client is
            created on startup from the configured timeout and TLS policy.

    Returns:
        web.Application: The configured application.
    """
    app = web.Application(middlewares=[request_context_middleware])
    app[CONFIG_STORE_KEY] = config_store
    app[ASSETS_KEY] = assets

    if client is None:
        app.cleanup_ctx.append(_icinga_client_ctx)
    else:
        app[TABLE_HANDLER_KEY] = TableQueryHandler(config_store, client)

    app.router.add_route("*", "/{tail:.*}", dispatch)
    return app
