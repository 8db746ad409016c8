# resume_intake/core/errors.py
"""Typed failures of the resume parsing core.

Each error carries the HTTP status and the user-facing message the API layer
returns as ``{"success": false, "message": ...}``.
"""
from __future__ import annotations

from typing import Optional


class ResumeParsingError(Exception):
    status_code: int = 500
    default_message: str = "Resume parsing failed."

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class TextExtractionEmpty(ResumeParsingError):
    status_code = 400
    default_message = "Could not extract text from file."


class UnsupportedFileType(ResumeParsingError):
    status_code = 400
    default_message = "Unsupported format. Use PDF, DOC, DOCX, TXT, or RTF."


class ModelUnavailable(ResumeParsingError):
    """Missing credentials or a failed call to the completion service."""
    status_code = 500
    default_message = "The AI parsing service is unavailable."

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None, upstream_status: Optional[int] = None):
        super().__init__(message, status_code=status_code)
        self.upstream_status = upstream_status


class InvalidModelOutput(ResumeParsingError):
    status_code = 422
    default_message = "AI response was not valid JSON. Please try again or enter the candidate manually."


class SchemaFetchFailed(ResumeParsingError):
    """Never reaches callers: the field loader logs it and degrades to zero custom fields."""
    status_code = 502
    default_message = "Failed to fetch custom fields"
