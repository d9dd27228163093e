# webapp/flash_error.py
from __future__ import annotations

from typing import Any, Optional

from flask import flash, g, request
from markupsafe import Markup

from util import debug
from util.error_message import is_error_message
from webapp.render import t


def flash_error(error: Any, context: Optional[str] = None, category: str = "pageErrors") -> None:
    """
    Show an error on the next rendered page. ErrorMessages are translated
    with their parameters escaped; anything else is reported as an unknown
    error and logged in full.
    """
    if is_error_message(error):
        flash(Markup(t(*error.to_escaped_array())), category)
        if error.original_error is not None:
            debug.app.info("%s: %s (%r)", context, error.msg_key, error.original_error)
    else:
        flash(t("unknown error"), category)
        debug.error(context=context, req=request, user=g.get("user"), error=error)
