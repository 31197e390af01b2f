"""Centralized error handler for artifactindex commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from artifactindex.utils.logging import logger

from .constants import ERROR_LOG_FILE


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs command failures and re-raises them as ClickException."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=error_msg,
            )

            ERROR_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
                f.write("\n" + "=" * 80 + "\n")
                f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                f.write("=" * 80 + "\n")
                f.write(f"{error_type}: {error_msg}\n\n")
                f.write(traceback.format_exc())
                f.write("=" * 80 + "\n\n")

            raise click.ClickException(
                f"{error_type}: {error_msg}\n\nFull traceback logged to: {ERROR_LOG_FILE}"
            ) from e

    return wrapper
