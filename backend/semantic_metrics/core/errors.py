"""
Error taxonomy for the metrics engine.

Services raise these; the API layer turns them into the structured
``{"success": false, "message": ..., "data": null}`` envelope.
"""

from typing import Any, Dict, List, Optional


class AnalysisError(Exception):
    """Base class for typed analysis failures."""

    code = "analysis_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ResourceNotFound(AnalysisError):
    """No resource matched a single-resource request."""

    code = "resource_not_found"
    status_code = 404


class Unauthorized(AnalysisError):
    """The caller lacks rights to the resource (decided outside the engine)."""

    code = "unauthorized"
    status_code = 403


class ContentProcessingError(AnalysisError):
    """Resource content is null or malformed and yielded no text to analyze."""

    code = "content_processing_error"
    status_code = 422
