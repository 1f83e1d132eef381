"""
Logging configuration module for the Icinga dashboard.

This module provides functionality to configure logging for the application
based on the run context. It supports different logging configurations for
development, production, and custom environments.
"""

import json
import logging.config
import os
from contextvars import ContextVar
from typing import Any, Dict, Iterator

from icinga_dashboard.config.dashboard_context import DashboardContext

# Id of the request currently being handled, "-" outside of a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def configure_logging(context: DashboardContext) -> None:
    """
    Configure logging for the application based on the provided run context.

    This function sets up logging based on the logging type specified in the
    run context. It supports three types of logging configurations:
    - dev: Development logging configuration
    - prod: Production logging configuration
    - custom: Custom logging configuration from a specified file

    It also adds a request ID filter to every configured handler so that
    log lines from concurrently handled requests can be told apart.

    Args:
        context: Run context containing logging settings.

    Raises:
        ValueError: If the logging type is invalid or if a custom logging
            configuration file is not provided when using the 'custom' type.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    elif logging_type == "dev":
        file_path = _get_local_package_file_path("logging-config-dev.json")
        _load_logging_config(file_path)
    elif logging_type == "prod":
        file_path = _get_local_package_file_path("logging-config-prod.json")
        _load_logging_config(file_path)
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        else:
            _load_logging_config(context.logging_config_file)
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    request_id_filter = _RequestIdFilter()
    for handler in _configured_handlers():
        handler.addFilter(request_id_filter)

    logging.debug("Logging configured and RequestIdFilter added.")


def _configured_handlers() -> Iterator[logging.Handler]:
    """Yield the handlers of the root logger and of every named logger."""
    yield from logging.getLogger().handlers
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger):
            yield from logger.handlers


def _load_logging_config(config_file: str) -> None:
    """
    Load logging configuration from a JSON file.

    This function reads a JSON file containing logging configuration and
    applies it to the Python logging system using dictConfig.

    Args:
        config_file: Path to the JSON file containing logging configuration.

    Raises:
        RuntimeError: If the file is not found, contains invalid JSON, or
            if there is any other error loading the configuration.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
            logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except Exception as err:
        raise RuntimeError(f"Error loading logging config: {str(err)}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """
    Get the absolute path to a file in the same directory as this module.

    Args:
        config_file: Name of the file to locate.

    Returns:
        str: Absolute path to the specified file.
    """
    return os.path.join(os.path.dirname(__file__), config_file)


class _RequestIdFilter(logging.Filter):
    """
    A logging filter that injects the current request ID into every log record.

    The ID is taken from :data:`request_id_var`, which the application's
    middleware sets for the duration of each request.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add the request ID to the log record.

        Args:
            record: The log record to be processed.

        Returns:
            bool: Always True to allow the record to be processed further.
        """
        record.request_id = request_id_var.get()
        return True
