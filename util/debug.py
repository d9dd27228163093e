# util/debug.py
"""
Logging setup and the diagnostic error log.

Areas log through named loggers (``libreviews.app``, ``libreviews.db``,
``libreviews.search``, ``libreviews.errors``). ``error()`` is what request
handlers call when something unexpected happened and the user only gets a
generic message.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import settings

app = logging.getLogger("libreviews.app")
db = logging.getLogger("libreviews.db")
search = logging.getLogger("libreviews.search")
errors = logging.getLogger("libreviews.errors")


HANDLER_NAME = "libreviews"


def configure_logging() -> None:
    """Install a stdout handler with ISO timestamps on the root logger (once)."""
    root_logger = logging.getLogger()
    if any(h.get_name() == HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.setLevel(settings.log_level())
    root_logger.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _describe_request(req: Any, user: Any) -> str:
    if req is None:
        return "-"
    who = getattr(user, "display_name", None) or "anonymous"
    return f"{getattr(req, 'method', '?')} {getattr(req, 'path', '?')} (user: {who})"


def error(*, context: Optional[str] = None, req: Any = None, user: Any = None,
          error: Any = None) -> None:
    """
    Log an unexpected error with whatever request context we have.
    Exceptions are logged with their traceback.
    """
    msg = f"Error occurred in context '{context or 'unspecified'}' handling {_describe_request(req, user)}"
    if isinstance(error, BaseException):
        errors.error(msg, exc_info=(type(error), error, error.__traceback__))
    else:
        errors.error("%s: %r", msg, error)
