"""
Main entry point for the Icinga dashboard.

This module loads the configuration, sets up logging, builds the web
application and serves it until the process is terminated.
"""

import logging
import sys

from aiohttp import web

from icinga_dashboard.app import create_app
from icinga_dashboard.assets import load_assets
from icinga_dashboard.config import DashboardContext, get_context
from icinga_dashboard.config.config_store import ConfigStore
from icinga_dashboard.config.logging_config import configure_logging
from icinga_dashboard.config.settings import Config, ConfigLoadError, load_config


def main(context: DashboardContext) -> int:
    """
    Set up and run the dashboard.

    1. Loads and validates the configuration file
    2. Loads the static assets
    3. Builds the application and serves it on the configured address

    Args:
        context: Run context containing the configuration file path.

    Returns:
        int: The process exit code.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    logger.info("Starting application...")

    try:
        config: Config = load_config(context.config_path)
    except ConfigLoadError as e:
        logger.critical(f"Failed to load config: {e}")
        return 1
    logger.info(f"loaded: config from {context.config_path}")

    assets = load_assets()
    logger.info("loaded: static assets")

    app = create_app(ConfigStore(config), assets)
    listen_address = config.http_server.listen_socket_address

    logger.info(f"Listening on {listen_address}")
    web.run_app(
        app,
        host=listen_address.host,
        port=listen_address.port,
        print=None,
    )
    logger.info("Shutdown complete.")
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        # Parse command-line arguments and environment variables
        dashboard_context: DashboardContext = get_context()

        # Configure logging based on the context
        configure_logging(dashboard_context)

        sys.exit(main(dashboard_context))
    except KeyboardInterrupt:
        logging.info("Shutdown initiated by user (Ctrl+C).")


if __name__ == "__main__":
    run()
