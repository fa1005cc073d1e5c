"""Global logging and error handling utilities"""
import logging
import sys
import traceback
from typing import Callable, Optional

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_logger = logging.getLogger('adcanvas')

# Host UI callback showing a message to the user: reporter(title, message)
_error_reporter: Optional[Callable[[str, str], None]] = None


def set_error_reporter(reporter: Optional[Callable[[str, str], None]]):
    """Register the callback used to show errors to the user (None to unset)"""
    global _error_reporter
    _error_reporter = reporter


def set_debug_mode(enabled: bool):
    global DEBUG_MODE
    DEBUG_MODE = bool(enabled)


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with optional user report in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to report (optional)
        title: Title for the report

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the full traceback
        - Reports the user message (or exception string) through the
          registered error reporter
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    _logger.error(f"{title}: {traceback.format_exc()}")

    message = user_message if user_message else str(e)
    if _error_reporter is not None:
        _error_reporter(title, message)
    else:
        _logger.error(f"{title} - {message}")

    raise e
