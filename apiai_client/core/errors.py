"""Error taxonomy shared by every layer of the client."""

from typing import Any


class ApiAiError(Exception):
    """Base error class for API.AI client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigError(ApiAiError):
    """Client configuration is missing a required value."""


class ValidationError(ApiAiError):
    """Validation error for local input issues (not API errors)."""


class RequestError(ApiAiError):
    """Transport failure, non-2xx response or unserializable request body."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        body: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class DecodeError(ApiAiError):
    """Response body is not valid JSON or does not have the expected shape."""
