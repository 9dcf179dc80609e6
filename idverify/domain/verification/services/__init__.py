"""
Domain Services for Identity Verification

Pure business logic: request validation and retry scheduling.
"""

from .request_validator import RequestValidator, IVerificationRequest, parse_iso_date
from .retry_policy import RetryPolicy

__all__ = [
    "RequestValidator",
    "IVerificationRequest",
    "parse_iso_date",
    "RetryPolicy",
]
