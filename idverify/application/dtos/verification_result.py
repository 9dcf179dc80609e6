"""
VerificationResult DTO

Outcome of one orchestrated verification or status check. This is the
serialization contract a storage layer must accept for audit history.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from idverify.domain.verification.entities import DocumentType, VerificationStatus
from idverify.domain.verification.errors import ErrorKind, VerificationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VerificationResult(BaseModel):
    """
    Response DTO for VerificationOrchestrator.

    Attributes:
        status: Final (or pending) verification status
        confidence: Name-match confidence 0-100; None when failed, pending,
            or when no record was found to compare against
        provider_name: Adapter that produced the result
        provider_reference_id: Vendor reference for polling and audit
        error_kind: Failure classification, set only when status is FAILED
        error_message: Failure detail, set only when status is FAILED
        checked_at: When the attempt completed (UTC)
        trace_id: Correlation ID of the originating request
        document_type: Document verified, when known
        attempts: Number of provider calls made
        date_of_birth_match: Whether claimed and returned dates of birth agree,
            None when either side is unknown
        message: Human-readable reason for the decision
    """

    status: VerificationStatus
    confidence: Optional[int] = Field(None, ge=0, le=100)
    provider_name: Optional[str] = None
    provider_reference_id: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    checked_at: datetime = Field(default_factory=_utcnow)
    trace_id: Optional[str] = None
    document_type: Optional[DocumentType] = None
    attempts: int = Field(0, ge=0)
    date_of_birth_match: Optional[bool] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "VerificationResult":
        if self.status in (VerificationStatus.FAILED, VerificationStatus.PENDING):
            if self.confidence is not None:
                raise ValueError(f"confidence must be unset when status is {self.status.value}")
        if self.status == VerificationStatus.VERIFIED and self.confidence is None:
            raise ValueError("confidence is required when status is verified")
        if (self.status == VerificationStatus.FAILED) != (self.error_kind is not None):
            raise ValueError("error_kind must be set if and only if status is failed")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @classmethod
    def failed(
        cls,
        error: VerificationError,
        provider_name: Optional[str] = None,
        trace_id: Optional[str] = None,
        document_type: Optional[DocumentType] = None,
        attempts: int = 0,
        provider_reference_id: Optional[str] = None,
    ) -> "VerificationResult":
        return cls(
            status=VerificationStatus.FAILED,
            error_kind=error.kind,
            error_message=str(error) or type(error).__name__,
            provider_name=provider_name,
            provider_reference_id=provider_reference_id,
            trace_id=trace_id,
            document_type=document_type,
            attempts=attempts,
        )
