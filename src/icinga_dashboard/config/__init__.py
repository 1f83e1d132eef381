"""
Configuration module for the Icinga dashboard.

This module parses command-line arguments and environment variables into the
run context of the dashboard. The only positional argument is the path of the
TOML configuration file; the remaining options control logging.
"""

import argparse
import os
from typing import Any, Optional, Sequence

from icinga_dashboard.config.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
)
from icinga_dashboard.config.dashboard_context import DashboardContext


def get_context(argv: Optional[Sequence[str]] = None) -> DashboardContext:
    """
    Parse command-line arguments and environment variables to create the run context.

    For each logging option, it first checks for a command-line argument,
    then falls back to an environment variable, and finally uses a default value.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Returns:
        DashboardContext: The parsed run context.
    """
    parser = argparse.ArgumentParser(
        description="A read-only web dashboard for Icinga host and service states."
    )

    parser.add_argument(
        "config_path",
        nargs="?",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the TOML configuration file (default: {DEFAULT_CONFIG_PATH}).",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("ICINGA_DASHBOARD_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "If not provided, the value is read from the ICINGA_DASHBOARD_LOGGING_TYPE environment variable.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("ICINGA_DASHBOARD_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    args: Any = parser.parse_args(argv)

    return DashboardContext(
        config_path=args.config_path,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
    )
