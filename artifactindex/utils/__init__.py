"""artifactindex utilities package."""

from .constants import ERROR_LOG_FILE, STATE_DIR
from .error_handler import handle_exceptions
from .logging import logger

__all__ = [
    "STATE_DIR",
    "ERROR_LOG_FILE",
    "handle_exceptions",
    "logger",
]
