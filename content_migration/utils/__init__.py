"""
Utility helpers used by the migration tool.

This subpackage exposes display path helpers, structured event reports and
logging setup.
"""

from .errors import EVENTS, InputTreeError, report_error, report_ok
from .logging import configure_logging, get_logger
from .paths import PATH_SEPARATOR

__all__ = [
    "EVENTS",
    "InputTreeError",
    "PATH_SEPARATOR",
    "configure_logging",
    "get_logger",
    "report_error",
    "report_ok",
]
