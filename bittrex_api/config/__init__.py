"""
Configuration module for client options and logging.

This module provides the options model shared by the request pipeline and
the rich logging setup.
"""

from .logs import setup_logging
from .options import ClientOptions, DEFAULT_BASE_URL

__all__ = ["ClientOptions", "DEFAULT_BASE_URL", "setup_logging"]
