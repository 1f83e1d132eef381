"""
Icinga API client implementation using the aiohttp library.

This module provides an implementation of the ObjectQueryClient interface that
uses a shared aiohttp ClientSession to send object queries to the Icinga API.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp
from yarl import URL

from icinga_dashboard.contracts import ObjectQueryClient
from icinga_dashboard.domain import UpstreamResponse

# Module logger
logger = logging.getLogger(__name__)

# Icinga treats a POST carrying this header as a GET with a request body
METHOD_OVERRIDE_HEADER = "X-HTTP-Method-Override"


class AiohttpIcingaClient(ObjectQueryClient):
    """
    A concrete implementation of ObjectQueryClient using the aiohttp library.

    Filter expressions do not fit into a query string reliably, so queries are
    sent as POST with a JSON body and the method overridden to GET. Timeout and
    TLS settings come from the shared session.
    """

    def __init__(self, session: aiohttp.ClientSession) -> None:
        """
        Initializes the client with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
        """
        self._session: aiohttp.ClientSession = session

    async def query(
        self, url: URL, username: str, password: str, body: Dict[str, Any]
    ) -> UpstreamResponse:
        """
        Sends the query and reads the complete response body.

        Transport failures (connecting, TLS, timeouts, reading the body) are
        logged and returned in the ``error`` field of the result.

        Args:
            url: The object endpoint to query.
            username: Username for HTTP Basic authentication.
            password: Password for HTTP Basic authentication.
            body: The JSON request body.

        Returns:
            UpstreamResponse: The outcome of the request.
        """
        logger.debug(f"Requesting Icinga URL: {url}")
        status_code: Optional[int] = None

        try:
            async with self._session.post(
                url,
                auth=aiohttp.BasicAuth(username, password),
                headers={
                    METHOD_OVERRIDE_HEADER: "GET",
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                data=json.dumps(body),
            ) as response:
                status_code = response.status
                response_body: bytes = await response.read()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            if status_code is None:
                logger.exception(f"Failed to obtain response from {url}")
            else:
                logger.exception(f"Failed to obtain response bytes from {url}")
            return UpstreamResponse(url=str(url), error=e, status_code=None, body=b"")

        logger.debug(f"Icinga responded to {url} with status {status_code}")
        return UpstreamResponse(
            url=str(url), error=None, status_code=status_code, body=response_body
        )
