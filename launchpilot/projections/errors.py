from __future__ import annotations
from typing import Any, Dict, List


class ProjectionError(Exception):
    """Base class for errors surfaced by the projection service."""


class ValidationError(ProjectionError):
    """Caller-supplied input failed its declared type or range.

    `details` holds one {"field", "message"} dict per offending field.
    """

    def __init__(self, details: List[Dict[str, Any]], message: str = "Invalid input data"):
        super().__init__(message)
        self.message = message
        self.details = list(details)


class InternalError(ProjectionError):
    """Unexpected failure while computing a projection."""
