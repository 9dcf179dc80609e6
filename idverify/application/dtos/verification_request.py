"""
VerificationRequest DTO

Data Transfer Object for a single identity-verification attempt.
Constructed by the calling service layer; never mutated afterwards.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict
import uuid

from idverify.domain.verification.entities import DocumentType


class VerificationRequest(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "document_type": "nin",
                "document_number": "12345678901",
                "claimed_first_name": "Ada",
                "claimed_last_name": "Lovelace",
                "date_of_birth": "1815-12-10",
                "provider_name": "dojah",
            }
        }
    )
    """
    Request DTO for VerificationOrchestrator.verify.

    Field presence is deliberately permissive here: shape rules per
    document type are checked by the orchestrator so that a malformed
    request becomes a FAILED result instead of a construction error.

    Attributes:
        document_type: Which document is being verified
        document_number: Identifier printed on numbered documents
        claimed_first_name: First name supplied by the caller
        claimed_last_name: Last name supplied by the caller
        date_of_birth: ISO date, required for NIN
        file_url: Location of an uploaded proof (DOCUMENT only)
        document_kind: Kind of uploaded proof, e.g. "utility_bill" (DOCUMENT only)
        metadata: Opaque extra data forwarded to the adapter (DOCUMENT only)
        provider_name: Adapter to use; orchestrator default when omitted
        trace_id: Correlation ID for logs
    """

    document_type: DocumentType = Field(..., description="Type of identity document")
    document_number: Optional[str] = Field(None, description="Document identifier")
    claimed_first_name: Optional[str] = Field(None, description="Claimed first name")
    claimed_last_name: Optional[str] = Field(None, description="Claimed last name")
    date_of_birth: Optional[str] = Field(None, description="Claimed date of birth (YYYY-MM-DD)")
    file_url: Optional[str] = Field(None, description="URL of an uploaded proof document")
    document_kind: Optional[str] = Field(
        None,
        description="Kind of uploaded proof (utility_bill, proof_of_address, ...)"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Opaque adapter metadata")
    provider_name: Optional[str] = Field(None, description="Verification provider to use")
    trace_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique trace ID for logging and debugging"
    )
