"""A read-only web dashboard for Icinga host and service states."""

__version__ = "0.1.0"
