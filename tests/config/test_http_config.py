"""
Unit tests for the HTTP client configuration module.

This module contains tests ensuring that the shared Icinga client session is
created with the configured timeout and TLS policy.

The tests follow the Arrange-Act-Assert (AAA) pattern and use proper mocking
of all external dependencies to ensure true unit testing.
"""

from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from yarl import URL

from icinga_dashboard.config.http_config import get_http_session
from icinga_dashboard.config.settings import IcingaApiConfig


def make_api_config(allow_invalid_certs: bool) -> IcingaApiConfig:
    return IcingaApiConfig(
        base_url=URL("https://icinga.example.com:5665/v1/"),
        username="dashboard",
        password="secret",
        timeout=12,
        allow_invalid_certs=allow_invalid_certs,
    )


def test_get_http_session_should_validate_certificates_by_default() -> None:
    """
    Tests that get_http_session keeps certificate validation when invalid certs are not allowed.
    """
    # Arrange
    mock_session = MagicMock(spec=aiohttp.ClientSession)
    mock_connector = MagicMock(spec=aiohttp.TCPConnector)

    with patch("aiohttp.ClientSession", return_value=mock_session) as mock_client_session:
        with patch("aiohttp.TCPConnector", return_value=mock_connector) as mock_tcp_connector:
            with patch("icinga_dashboard.config.http_config.logger") as mock_logger:
                # Act
                result = get_http_session(make_api_config(allow_invalid_certs=False))

    # Assert
    mock_tcp_connector.assert_called_once_with()
    mock_logger.info.assert_called_once_with("Creating HTTP session with TLS certificate validation")
    mock_client_session.assert_called_once_with(
        connector=mock_connector,
        timeout=aiohttp.ClientTimeout(total=12),
    )
    assert result == mock_session


def test_get_http_session_should_disable_certificate_validation_when_allowed() -> None:
    """
    Tests that get_http_session disables certificate validation when invalid certs are allowed.
    """
    # Arrange
    mock_connector = MagicMock(spec=aiohttp.TCPConnector)

    with patch("aiohttp.ClientSession") as mock_client_session:
        with patch("aiohttp.TCPConnector", return_value=mock_connector) as mock_tcp_connector:
            with patch("icinga_dashboard.config.http_config.logger") as mock_logger:
                # Act
                get_http_session(make_api_config(allow_invalid_certs=True))

    # Assert
    mock_tcp_connector.assert_called_once_with(ssl=False)
    mock_logger.warning.assert_called_once_with(
        "Creating HTTP session without TLS certificate validation"
    )
    assert mock_client_session.call_args.kwargs["connector"] is mock_connector


@pytest.mark.asyncio
async def test_get_http_session_should_return_usable_session() -> None:
    """
    Tests that get_http_session returns a real session carrying the configured timeout.
    """
    # Act
    session = get_http_session(make_api_config(allow_invalid_certs=False))

    # Assert
    try:
        assert isinstance(session, aiohttp.ClientSession)
        assert session.timeout.total == 12
    finally:
        await session.close()
