# catalog/thing.py
"""Review subjects ("things"): a multilingual label, aliases, description and URLs."""
from __future__ import annotations

from typing import Any, List, Optional
from urllib.parse import urlparse

from catalog.errors import ValidationError
from catalog.revision import Revisioned
from util.error_message import ErrorMessage

LABEL_MAX_LENGTH = 256


def _is_valid_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Thing(Revisioned):
    table = "things"
    data_fields = ("urls", "label", "aliases", "description", "created_on", "created_by")
    json_fields = {"urls": list, "label": dict, "aliases": dict, "description": dict}

    def validate(self) -> None:
        for lang, value in (self.label or {}).items():
            if value is not None and len(value) > LABEL_MAX_LENGTH:
                raise ValidationError(f"Label for '{lang}' exceeds {LABEL_MAX_LENGTH} characters.", field="label")
        for url in self.urls or []:
            if not _is_valid_url(url):
                raise ValidationError(f"Invalid URL: {url}", field="urls")

    def get_reviews(self) -> list:
        from catalog.review import Review
        return Review.filter_current(self._conn, "thing_id = ?", (self.id,))

    @staticmethod
    def resolve_error(error: Any) -> Any:
        """Turn known model errors into user-facing messages; pass anything else through."""
        if isinstance(error, ValidationError):
            if error.field == "label":
                return ErrorMessage("label too long", [str(LABEL_MAX_LENGTH)], error)
            if error.field == "urls":
                return ErrorMessage("invalid url", [], error)
        return error

    @classmethod
    def create(cls, conn, user, *, label: dict, urls: Optional[List[str]] = None,
               aliases: Optional[dict] = None, description: Optional[dict] = None) -> "Thing":
        thing = cls.create_first_revision(conn, user, label=label, urls=urls or [],
                                          aliases=aliases or {}, description=description or {})
        return thing.save()
