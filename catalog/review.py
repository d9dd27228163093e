# catalog/review.py
from __future__ import annotations

from typing import Any

from markupsafe import escape

from catalog import markdown_render
from catalog.errors import ValidationError
from catalog.revision import Revisioned
from util.error_message import ErrorMessage

TITLE_MAX_LENGTH = 255


class Review(Revisioned):
    """A review of a thing. `text` holds the Markdown source, `html` the rendered version."""
    table = "reviews"
    data_fields = ("thing_id", "title", "text", "html", "star_rating", "created_on", "created_by")
    json_fields = {"title": dict, "text": dict, "html": dict}

    def validate(self) -> None:
        if not self.thing_id:
            raise ValidationError("A review must belong to a thing.", field="thing_id")
        if not isinstance(self.star_rating, int) or not 1 <= self.star_rating <= 5:
            raise ValidationError("Star rating must be between 1 and 5.", field="star_rating")
        if not any((self.title or {}).values()):
            raise ValidationError("A review needs a title.", field="title")
        for value in (self.title or {}).values():
            if value and len(value) > TITLE_MAX_LENGTH:
                raise ValidationError("Title too long.", field="title")
        if not any((self.text or {}).values()):
            raise ValidationError("A review needs text.", field="text")

    def set_text(self, lang: str, markdown_source: str) -> None:
        self.text[lang] = markdown_source
        self.html[lang] = markdown_render.render(markdown_source)

    @staticmethod
    def resolve_error(error: Any) -> Any:
        if isinstance(error, ValidationError):
            keys = {
                "star_rating": "invalid star rating",
                "title": "need title",
                "text": "need review text",
            }
            if error.field in keys:
                return ErrorMessage(keys[error.field], [], error)
        return error

    @classmethod
    def create(cls, conn, user, thing, *, lang: str, title: str, text: str, star_rating: int) -> "Review":
        review = cls.create_first_revision(conn, user, thing_id=thing.id,
                                           title={lang: str(escape(title))} if title else {},
                                           star_rating=star_rating)
        if text:
            review.set_text(lang, text)
        return review.save()
