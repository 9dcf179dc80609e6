"""
Domain: Verification Error Taxonomy

Every failure the core can report is one of five kinds. Validation and
configuration errors are resolved before any vendor call; network,
timeout and provider errors end up as a FAILED result carrying the kind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "validation_error"
    CONFIGURATION_ERROR = "configuration_error"
    NETWORK_ERROR = "network_error"
    PROVIDER_TIMEOUT = "provider_timeout"
    PROVIDER_ERROR = "provider_error"


class VerificationError(Exception):
    """Base class for all verification failures."""

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR
    retryable: bool = False


class ValidationError(VerificationError):
    """Malformed or missing request fields."""

    kind = ErrorKind.VALIDATION_ERROR


class ConfigurationError(VerificationError):
    """Unknown provider name or a provider missing required credentials."""

    kind = ErrorKind.CONFIGURATION_ERROR


class NetworkError(VerificationError):
    """Transient transport failure (connection reset, 5xx)."""

    kind = ErrorKind.NETWORK_ERROR
    retryable = True


class ProviderTimeout(VerificationError):
    """The vendor did not answer within the configured deadline."""

    kind = ErrorKind.PROVIDER_TIMEOUT
    retryable = True


class ProviderError(VerificationError):
    """
    The vendor answered but signalled an application-level failure.

    Not retried unless the adapter classifies it as transient
    (e.g. rate limiting).
    """

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, transient: bool = False, status_code: int = None):
        super().__init__(message)
        self.transient = transient
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.transient


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, VerificationError) and bool(error.retryable)
