"""Standardized error handling for the application."""

import logging
from typing import Any, Dict, Optional

# Configure logger
logger = logging.getLogger(__name__)


class CaseBuddyError(Exception):
    """Base exception class for all application errors."""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for API responses.

        Returns:
            Dict containing error details
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }

    def log(self, level: int = logging.ERROR) -> None:
        """Log the error with appropriate level and context.

        Args:
            level: Logging level to use
        """
        log_context = {
            "error_type": self.__class__.__name__,
            "status_code": self.status_code,
            **self.details,
        }
        logger.log(level, f"{self.message}", extra={"context": log_context})


# Feedback pipeline errors
class ValidationError(CaseBuddyError):
    """User input failed a precondition."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=422, details=details)


class QuotaExceededError(CaseBuddyError):
    """Daily AI feedback limit reached."""

    def __init__(self, limit: int):
        """Initialize quota error.

        Args:
            limit: The configured daily limit, used for user messaging
        """
        self.limit = limit
        message = (
            f"You've reached your daily limit of {limit} AI feedback requests. "
            "Limit resets at midnight UTC."
        )
        super().__init__(message=message, status_code=429, details={"limit": limit})


class GenerationError(CaseBuddyError):
    """The model call failed or returned an unusable response."""

    def __init__(self, message: str = "Failed to generate feedback. Please try again."):
        super().__init__(message=message, status_code=502)


# Infrastructure errors
class StoreUnavailableError(CaseBuddyError):
    """The document store could not be reached."""

    def __init__(self, operation: str, reason: str = ""):
        message = f"Document store unavailable during {operation}"
        super().__init__(message=message, status_code=503, details={"operation": operation, "reason": reason})


class SimilaritySearchError(CaseBuddyError):
    """Similar cases could not be loaded from any source."""

    def __init__(self, case_id: str, reason: str = ""):
        message = "Failed to load similar cases. Please try again later."
        super().__init__(message=message, status_code=503, details={"case_id": case_id, "reason": reason})


class DocumentNotFoundError(CaseBuddyError):
    """Requested document does not exist."""

    def __init__(self, document_type: str, query: Dict[str, Any]):
        message = f"{document_type} not found"
        super().__init__(message=message, status_code=404, details={"query": query})


# AI Provider Errors
class ProviderError(CaseBuddyError):
    """Base class for AI provider errors."""

    def __init__(self, message: str = "AI provider error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=502, details=details)


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    retry_after: float = 0

    def __init__(self, provider: str, retry_after: Optional[float] = None):
        """Initialize rate limit error.

        Args:
            provider: Name of the AI provider
            retry_after: Seconds to wait before retrying
        """
        message = f"Rate limit exceeded for provider {provider}"
        details = {"provider": provider, "retry_after": retry_after or 0}
        self.retry_after = retry_after or 0

        super().__init__(message=message, details=details)
        self.status_code = 429


def convert_exception(exc: Exception) -> CaseBuddyError:
    """Convert an arbitrary exception into an application error.

    Args:
        exc: The exception to convert

    Returns:
        The exception itself if it is already an application error,
        otherwise a generic 500 error wrapping it
    """
    if isinstance(exc, CaseBuddyError):
        return exc
    return CaseBuddyError(message="Internal server error", status_code=500, details={"reason": str(exc)})
