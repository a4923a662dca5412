# app/utils/errors.py
from typing import Any


class QuestionGenerationError(Exception):
    """Base class for every failure the generation endpoint reports to its caller."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(QuestionGenerationError):
    """Provider credentials are missing or malformed."""
    status_code = 500


class RequestValidationError(QuestionGenerationError):
    status_code = 400


class UpstreamError(QuestionGenerationError):
    """The LLM provider could not be reached or answered with a non-2xx status."""
    status_code = 500


class ParseError(QuestionGenerationError):
    status_code = 500

    def __init__(self, message: str, raw_response: str | None = None, details: Any = None):
        super().__init__(message, details=details)
        self.raw_response = raw_response

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["raw_response"] = self.raw_response
        return body


class StorageError(QuestionGenerationError):
    """The question store rejected a query (400) or an insert (500)."""
    status_code = 500
