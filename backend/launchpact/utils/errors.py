"""Custom exception classes."""

from fastapi import HTTPException, status

GENERIC_GENERATION_FAILURE = "Generation failed, please retry."


class LaunchPactError(Exception):
    """Base exception for LaunchPact backend errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(LaunchPactError):
    """Required configuration is missing or invalid."""

    pass


class GenerationError(LaunchPactError):
    """Error during LLM content generation."""

    pass


class MalformedStructuredOutputError(GenerationError):
    """A model answered, but the answer did not parse or failed validation."""

    def __init__(self, message: str, raw_text: str = "", details: dict | None = None):
        self.raw_text = raw_text
        super().__init__(message, details)


class GenerationFailedError(GenerationError):
    """Generation failed and the caller has no safe substitute."""

    def __init__(self, message: str, task: str, attempts: tuple = (), details: dict | None = None):
        self.task = task
        self.attempts = attempts
        super().__init__(message, details)


class GenerationCancelledError(GenerationError):
    """The caller cancelled the generation before it resolved."""

    pass


def http_error(
    status_code: int,
    message: str,
    headers: dict | None = None,
) -> HTTPException:
    """Create an HTTPException with the given parameters."""
    return HTTPException(
        status_code=status_code,
        detail=message,
        headers=headers,
    )


def bad_request(message: str) -> HTTPException:
    """Create a 400 Bad Request exception."""
    return http_error(status.HTTP_400_BAD_REQUEST, message)


def service_unavailable(message: str = "Service unavailable") -> HTTPException:
    """Create a 503 Service Unavailable exception."""
    return http_error(status.HTTP_503_SERVICE_UNAVAILABLE, message)
