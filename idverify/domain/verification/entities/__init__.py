"""
Domain Entities for Identity Verification

These are pure domain objects with no external dependencies.
Vendor-specific payloads are translated into these shapes by adapters.
"""

from .document_type import DocumentType, NUMBERED_DOCUMENT_TYPES
from .verification_status import VerificationStatus
from .identity_record import VerifiedIdentityRecord
from .provider_response import ProviderOutcome, ProviderResponse

__all__ = [
    "DocumentType",
    "NUMBERED_DOCUMENT_TYPES",
    "VerificationStatus",
    "VerifiedIdentityRecord",
    "ProviderOutcome",
    "ProviderResponse",
]
