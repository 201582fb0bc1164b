"""
Custom exceptions for video generation routing.

Every failure the router can report has its own exception type. Each type
carries a ``kind`` string which is copied into the failed
``GenerationResult`` so callers can branch on it without parsing messages.
"""

from typing import Optional


class ErrorKind:
    """String identifiers reported in ``GenerationResult.error_kind``."""
    INVALID_REQUEST = "InvalidRequest"
    PROVIDER_NOT_FOUND = "ProviderNotFound"
    PROVIDER_NOT_IMPLEMENTED = "ProviderNotImplemented"
    MISSING_CREDENTIAL = "MissingCredential"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    RATE_LIMITED = "RateLimited"
    INSUFFICIENT_CREDITS = "InsufficientCredits"
    PROVIDER_ERROR = "ProviderError"
    NO_VIDEO_RETURNED = "NoVideoReturned"
    NO_TASK_ID = "NoTaskId"
    GENERATION_FAILED = "GenerationFailed"
    PROVIDER_TIMEOUT = "ProviderTimeout"
    CLIENT_TIMEOUT = "ClientTimeout"
    GENERATION_CANCELLED = "GenerationCancelled"


class VideoGenerationError(Exception):
    """Base exception for video generation errors."""
    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class InvalidRequestError(VideoGenerationError):
    """Raised when request parameters are malformed or unsupported."""
    kind = ErrorKind.INVALID_REQUEST


class ProviderNotFoundError(VideoGenerationError):
    kind = ErrorKind.PROVIDER_NOT_FOUND


class ProviderNotImplementedError(VideoGenerationError):
    kind = ErrorKind.PROVIDER_NOT_IMPLEMENTED


class MissingCredentialError(VideoGenerationError):
    """Raised when no API key was supplied for a provider."""
    kind = ErrorKind.MISSING_CREDENTIAL


class ProviderAPIError(VideoGenerationError):
    """Exception for non-success responses and transport failures."""
    kind = ErrorKind.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        self.status_code = status_code
        super().__init__(message, provider=provider)


class AuthenticationError(ProviderAPIError):
    """Exception for authentication failures."""
    kind = ErrorKind.AUTHENTICATION_FAILED


class RateLimitError(ProviderAPIError):
    """Exception for rate limiting errors."""
    kind = ErrorKind.RATE_LIMITED


class InsufficientCreditsError(ProviderAPIError):
    """Exception for provider billing/credit exhaustion.

    Raised when a provider indicates the account does not have enough credits
    to perform the requested operation. Treat as non-retryable until the user
    adds credits or switches provider.
    """
    kind = ErrorKind.INSUFFICIENT_CREDITS


class NoVideoReturnedError(VideoGenerationError):
    """A success response did not include a video locator."""
    kind = ErrorKind.NO_VIDEO_RETURNED


class NoTaskIdError(VideoGenerationError):
    """A job submission response did not include a task identifier."""
    kind = ErrorKind.NO_TASK_ID


class GenerationFailedError(VideoGenerationError):
    """The provider reported that the generation job failed."""
    kind = ErrorKind.GENERATION_FAILED


class ProviderTimeoutError(VideoGenerationError):
    """The provider reported that the generation job timed out."""
    kind = ErrorKind.PROVIDER_TIMEOUT


class ClientTimeoutError(VideoGenerationError):
    """The local polling ceiling elapsed before the job finished."""
    kind = ErrorKind.CLIENT_TIMEOUT


class GenerationCancelledError(VideoGenerationError):
    """The caller cancelled the generation while it was being polled."""
    kind = ErrorKind.GENERATION_CANCELLED
