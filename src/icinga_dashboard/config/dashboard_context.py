"""
Run context for the Icinga dashboard.

This module defines the data structure holding the parameters the process
is started with. The dashboard's own settings live in the TOML file that
``config_path`` points at; see :mod:`icinga_dashboard.config.settings`.
"""

from typing import NamedTuple


class DashboardContext(NamedTuple):
    """
    Parameters the dashboard process was started with.

    Attributes:
        config_path: Path to the TOML configuration file.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
    """

    config_path: str
    logging_type: str
    logging_config_file: str
