"""
HTTP client configuration module for the Icinga dashboard.

This module provides functionality to create the HTTP client session used to
talk to the Icinga API. The session is created once at startup and shared by
all requests.
"""

import logging

import aiohttp

from icinga_dashboard.config.settings import IcingaApiConfig

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(api_config: IcingaApiConfig) -> aiohttp.ClientSession:
    """
    Create and configure an HTTP client session based on the Icinga API settings.

    Using a shared session is recommended for performance reasons. Must be
    called from within a running event loop.

    Args:
        api_config: Icinga API settings holding the timeout and TLS policy.

    Returns:
        aiohttp.ClientSession: A configured HTTP client session.
    """
    if api_config.allow_invalid_certs:
        logger.warning("Creating HTTP session without TLS certificate validation")
        connector = aiohttp.TCPConnector(ssl=False)
    else:
        logger.info("Creating HTTP session with TLS certificate validation")
        connector = aiohttp.TCPConnector()

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=api_config.timeout),
    )
