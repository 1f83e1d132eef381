"""
Constants for the Icinga dashboard.

This module defines default values for all configurable parameters
of the dashboard. These constants are used as fallback values when
neither command-line arguments, environment variables nor the
configuration file provide them.
"""

# Command-line defaults
DEFAULT_CONFIG_PATH = "config.toml"

# Icinga API defaults
DEFAULT_API_TIMEOUT = 30
DEFAULT_ALLOW_INVALID_CERTS = False

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""
