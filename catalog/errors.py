# catalog/errors.py
from __future__ import annotations

from typing import Optional


class ModelError(Exception):
    """Base class for errors raised by the document store models."""


class DocumentNotFound(ModelError):
    pass


class RevisionDeletedError(ModelError):
    """The requested revision has been deleted."""


class RevisionStaleError(ModelError):
    """The requested id points at an archived (outdated) revision."""


class ValidationError(ModelError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
