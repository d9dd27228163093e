# webapp/resource_errors.py
from __future__ import annotations

from catalog.errors import DocumentNotFound, ModelError, RevisionDeletedError, RevisionStaleError
from webapp import render


def handle(error: ModelError, doc_type: str, doc_id: str):
    """
    Render the error page for a document that can't be shown. Errors that
    aren't about the document's existence or state are re-raised.
    """
    if isinstance(error, DocumentNotFound):
        return render.resource_error({
            "title_key": f"{doc_type} not found title",
            "body_key": f"{doc_type} not found",
            "body_params": [doc_id],
        }, status=404)
    if isinstance(error, RevisionDeletedError):
        return render.resource_error({
            "title_key": f"{doc_type} deleted title",
            "body_key": f"{doc_type} deleted",
        }, status=404)
    if isinstance(error, RevisionStaleError):
        return render.resource_error({
            "title_key": "stale revision title",
            "body_key": f"stale {doc_type} revision",
        }, status=403)
    raise error
