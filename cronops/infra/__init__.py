"""
Infrastructure package.

Settings, logging and metrics shared by the API, CLI and registry.
"""

from .logging_config import DailyRotatingFileHandler, setup_logging
from .metrics import REGISTRY

__all__ = ["DailyRotatingFileHandler", "setup_logging", "REGISTRY"]
