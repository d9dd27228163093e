# util/error_message.py
from __future__ import annotations

from typing import Any, List, Optional

from markupsafe import escape


class ErrorMessage(Exception):
    """
    A user-facing error: a message key for the locale catalogues plus
    positional string parameters. ``original_error`` carries the underlying
    exception, if any, for the diagnostic log.
    """

    def __init__(self, msg_key: str, msg_params: Optional[List[str]] = None,
                 original_error: Optional[BaseException] = None):
        if not msg_key:
            raise ValueError("Must provide at least a message key for the error.")

        if msg_params is not None and not isinstance(msg_params, list):
            raise TypeError("Message parameters must be provided as a list.")

        msg_params = list(msg_params or [])
        for ele in msg_params:
            if not isinstance(ele, str):
                raise TypeError("Message parameters must be strings.")

        super().__init__(msg_key)
        self.msg_key = msg_key
        self.msg_params = msg_params
        self.original_error = original_error

    def to_array(self) -> List[str]:
        return [self.msg_key] + self.msg_params

    def to_escaped_array(self) -> List[str]:
        return [self.msg_key] + [str(escape(p)) for p in self.msg_params]

    def __repr__(self) -> str:
        return f"ErrorMessage({self.msg_key!r}, {self.msg_params!r})"


def is_error_message(obj: Any) -> bool:
    return isinstance(obj, ErrorMessage)
