"""
The table query handler.

This module turns a ``/table`` request into an Icinga object query and the
query's outcome into a response. Every failure is handled where it occurs and
becomes a response; nothing raised here is meant to reach the server.
"""

import logging
from typing import Any, Dict

from aiohttp import web
from yarl import URL

from icinga_dashboard import renderer
from icinga_dashboard.config.config_store import ConfigStore
from icinga_dashboard.contracts import ObjectQueryClient
from icinga_dashboard.domain import ObjectType, QueryParameters, UpstreamResponse, sort_rows
from icinga_dashboard.upstream.results import UpstreamContractError, parse_results

# Module logger
logger = logging.getLogger(__name__)


def compose_object_url(base_url: URL, objtype: ObjectType) -> URL:
    """
    Resolve ``objects/<objtype>`` against the Icinga API base URL.

    Resolution follows RFC 3986, so ``https://icinga:5665/v1/`` yields
    ``https://icinga:5665/v1/objects/hosts`` while a base without the trailing
    slash replaces its last path segment.

    Raises:
        ValueError: If the base URL cannot serve as a base for HTTP requests.
    """
    if base_url.scheme not in ("http", "https") or not base_url.host:
        raise ValueError(f"{str(base_url)!r} is not an absolute HTTP(S) URL")
    return base_url.join(URL(f"objects/{objtype.value}"))


def decode_error_body(body: bytes) -> str:
    """
    Decode an upstream error payload for display.

    UTF-8 is tried first; otherwise each byte is taken as the code point of
    the same value. Never fails.
    """
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return body.decode("latin-1")


class TableQueryHandler:
    """
    Handles requests for the status table.

    The handler holds no per-request state; a single instance serves all
    concurrent requests.
    """

    def __init__(self, config_store: ConfigStore, client: ObjectQueryClient) -> None:
        """
        Args:
            config_store: Store holding the Icinga API settings.
            client: Client used to query the Icinga API.
        """
        self._config_store: ConfigStore = config_store
        self._client: ObjectQueryClient = client

    async def handle(self, query_string: str) -> web.Response:
        """
        Validate the query, run it against Icinga and render the outcome.

        Args:
            query_string: The raw query string of the request, may be empty.

        Returns:
            web.Response: The rendered table, the Icinga error view, a 400
                for invalid parameters or a 500 for server-side failures.
        """
        params = QueryParameters.parse(query_string)

        objtype_value = params.get_last("objtype")
        if objtype_value is None:
            return renderer.missing_parameter_response("objtype")
        try:
            objtype = ObjectType(objtype_value)
        except ValueError:
            return renderer.invalid_parameter_response("objtype", objtype_value)

        filter_expression = params.get_last("filter")
        if filter_expression is None:
            return renderer.missing_parameter_response("filter")

        api_body: Dict[str, Any] = {"filter": filter_expression}

        # released before contacting Icinga
        api_config = (await self._config_store.snapshot()).icinga_api

        try:
            url = compose_object_url(api_config.base_url, objtype)
        except ValueError as e:
            logger.error(
                f"Failed to append object type-specific path for {objtype.value!r} "
                f"to Icinga API base URL {str(api_config.base_url)!r}: {e}"
            )
            return renderer.internal_error_response()

        result = await self._client.query(
            url, api_config.username, api_config.password, api_body
        )
        return self._respond(objtype, result)

    def _respond(self, objtype: ObjectType, result: UpstreamResponse) -> web.Response:
        if result.error is not None or result.status_code is None:
            # details were logged by the client
            return renderer.internal_error_response()

        if result.status_code != 200:
            logger.info(f"Icinga answered {result.url} with status {result.status_code}")
            return renderer.safe_render(
                renderer.render_upstream_error,
                result.status_code,
                decode_error_body(result.body),
            )

        try:
            rows = parse_results(objtype, result.body)
        except UpstreamContractError as e:
            logger.error(f"Unexpected response from {result.url}: {e}")
            return renderer.internal_error_response()

        logger.debug(f"Rendering {len(rows)} rows from {result.url}")
        return renderer.safe_render(renderer.render_table, objtype, sort_rows(rows))
