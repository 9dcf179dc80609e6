"""
Domain Entity: VerificationStatus
"""

from enum import Enum


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"
    NEEDS_REVIEW = "needs_review"
    FAILED = "failed"
    # Only produced for providers that answer asynchronously
    PENDING = "pending"

    @property
    def is_terminal(self) -> bool:
        return self is not VerificationStatus.PENDING
