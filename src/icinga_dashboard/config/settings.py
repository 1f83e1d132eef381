"""
Structures representing the dashboard configuration.

The configuration is read once at startup from a TOML file and validated into
immutable records. Any problem with the file is fatal: the caller is expected
to let a :class:`ConfigLoadError` stop the process rather than start degraded.
"""

import ipaddress
import logging
import tomllib
from typing import Any, Dict, NamedTuple

from yarl import URL

from icinga_dashboard.config.constants import DEFAULT_ALLOW_INVALID_CERTS, DEFAULT_API_TIMEOUT

# Module logger
logger = logging.getLogger(__name__)


class ListenAddress(NamedTuple):
    """IP address and port on which to listen for connections."""

    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class HttpServerConfig(NamedTuple):
    """Configuration related to the HTTP server."""

    listen_socket_address: ListenAddress


class IcingaApiConfig(NamedTuple):
    """
    Configuration related to the Icinga API.

    Attributes:
        base_url: Base URL of the Icinga API, e.g. ``https://icinga:5665/v1/``.
        username: Username with which to authenticate against the Icinga API.
        password: Password with which to authenticate against the Icinga API.
        timeout: Total timeout in seconds for a single API request.
        allow_invalid_certs: Whether to skip TLS certificate validation.
    """

    base_url: URL
    username: str
    password: str
    timeout: float
    allow_invalid_certs: bool


class Config(NamedTuple):
    """The dashboard's full configuration."""

    http_server: HttpServerConfig
    icinga_api: IcingaApiConfig


class ConfigLoadError(Exception):
    """
    An error that occurred while loading the configuration.

    Attributes:
        stage: What was being done when the error occurred: one of
            ``opening``, ``reading``, ``decoding``, ``parsing`` or ``validating``.
    """

    def __init__(self, stage: str, error: Exception) -> None:
        super().__init__(f"error {stage} config file: {error}")
        self.stage: str = stage


def parse_listen_address(value: str) -> ListenAddress:
    """
    Parse a socket address of the form ``1.2.3.4:80`` or ``[::1]:80``.

    Host names are not accepted; the host part must be an IP address literal.

    Raises:
        ValueError: If the value is not a valid socket address.
    """
    if value.startswith("["):
        host, _, rest = value[1:].partition("]")
        if not rest.startswith(":"):
            raise ValueError(f"invalid socket address {value!r}")
        port_text = rest[1:]
        ipaddress.IPv6Address(host)
    else:
        host, sep, port_text = value.rpartition(":")
        if not sep:
            raise ValueError(f"invalid socket address {value!r}: missing port")
        ipaddress.IPv4Address(host)

    if not port_text.isdigit() or int(port_text) > 65535:
        raise ValueError(f"invalid port in socket address {value!r}")
    return ListenAddress(host=host, port=int(port_text))


def _get_table(document: Dict[str, Any], key: str) -> Dict[str, Any]:
    table = document.get(key)
    if not isinstance(table, dict):
        raise ValueError(f"missing table [{key}]")
    return table


def _get_string(table: Dict[str, Any], section: str, key: str) -> str:
    value = table.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{section}.{key} must be a string")
    return value


def _parse_base_url(value: str) -> URL:
    url = URL(value)
    if not url.scheme:
        raise ValueError(f"icinga_api.base_url {value!r} is not an absolute URL")
    return url


def parse_config(document: Dict[str, Any]) -> Config:
    """
    Validate a parsed TOML document into a :class:`Config`.

    Raises:
        ValueError: If a required value is missing or has the wrong type.
    """
    http_server = _get_table(document, "http_server")
    icinga_api = _get_table(document, "icinga_api")

    timeout = icinga_api.get("timeout", DEFAULT_API_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError("icinga_api.timeout must be a positive number of seconds")

    allow_invalid_certs = icinga_api.get("allow_invalid_certs", DEFAULT_ALLOW_INVALID_CERTS)
    if not isinstance(allow_invalid_certs, bool):
        raise ValueError("icinga_api.allow_invalid_certs must be a boolean")

    return Config(
        http_server=HttpServerConfig(
            listen_socket_address=parse_listen_address(
                _get_string(http_server, "http_server", "listen_socket_address")
            ),
        ),
        icinga_api=IcingaApiConfig(
            base_url=_parse_base_url(_get_string(icinga_api, "icinga_api", "base_url")),
            username=_get_string(icinga_api, "icinga_api", "username"),
            password=_get_string(icinga_api, "icinga_api", "password"),
            timeout=timeout,
            allow_invalid_certs=allow_invalid_certs,
        ),
    )


def load_config(config_path: str) -> Config:
    """
    Load and validate the configuration file.

    Args:
        config_path: Path to the TOML configuration file.

    Returns:
        Config: The validated configuration.

    Raises:
        ConfigLoadError: If the file cannot be opened, read, decoded as UTF-8,
            parsed as TOML or validated.
    """
    try:
        config_file = open(config_path, "rb")
    except OSError as err:
        raise ConfigLoadError("opening", err) from err

    with config_file:
        try:
            raw: bytes = config_file.read()
        except OSError as err:
            raise ConfigLoadError("reading", err) from err

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ConfigLoadError("decoding", err) from err

    try:
        document: Dict[str, Any] = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ConfigLoadError("parsing", err) from err

    try:
        config = parse_config(document)
    except ValueError as err:
        raise ConfigLoadError("validating", err) from err

    logger.debug(f"Loaded configuration from {config_path}")
    return config
