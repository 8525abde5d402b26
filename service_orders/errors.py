"""
Failure taxonomy for CSV imports.

Every failure carries a user-facing message and optional details. The
orchestrator turns them into structured responses; none of them is allowed to
reach the HTTP layer as an unhandled exception.
"""

from __future__ import annotations

from typing import Optional


class ImportFailure(Exception):
    """Base class for every structured import failure."""

    status_code: int = 400
    default_message: str = "import failed"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MissingInput(ImportFailure):
    default_message = "no file provided"


class DecodeExhausted(ImportFailure):
    """No candidate encoding produced a header line and data rows."""

    default_message = "the uploaded file could not be read as CSV with any supported encoding"


class EmptyResult(ImportFailure):
    """The file was parsed but contained no data rows."""

    default_message = "the CSV file was processed, but no valid data was found"


class InternalProcessingError(ImportFailure):
    status_code = 500
    default_message = "error while processing the file"
