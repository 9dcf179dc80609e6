"""
Domain Entity: ProviderResponse

What an adapter hands back to the orchestrator: a matched record, an
explicit "no record" answer, or a pending reference for async providers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .identity_record import VerifiedIdentityRecord


class ProviderOutcome(str, Enum):
    RECORD_FOUND = "record_found"
    NO_RECORD = "no_record"
    PENDING = "pending"


@dataclass
class ProviderResponse:
    outcome: ProviderOutcome
    provider_reference_id: Optional[str] = None
    record: Optional[VerifiedIdentityRecord] = None
    raw_payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.outcome == ProviderOutcome.RECORD_FOUND and self.record is None:
            raise ValueError("RECORD_FOUND response requires a record")
        if self.outcome != ProviderOutcome.RECORD_FOUND and self.record is not None:
            raise ValueError(f"{self.outcome.value} response must not carry a record")

    @classmethod
    def found(cls, record: VerifiedIdentityRecord) -> "ProviderResponse":
        return cls(
            outcome=ProviderOutcome.RECORD_FOUND,
            provider_reference_id=record.provider_reference_id,
            record=record,
            raw_payload=record.raw_payload,
        )

    @classmethod
    def no_record(
        cls,
        provider_reference_id: Optional[str] = None,
        raw_payload: Optional[Dict[str, Any]] = None,
    ) -> "ProviderResponse":
        return cls(
            outcome=ProviderOutcome.NO_RECORD,
            provider_reference_id=provider_reference_id,
            raw_payload=raw_payload or {},
        )

    @classmethod
    def pending(
        cls,
        provider_reference_id: str,
        raw_payload: Optional[Dict[str, Any]] = None,
    ) -> "ProviderResponse":
        return cls(
            outcome=ProviderOutcome.PENDING,
            provider_reference_id=provider_reference_id,
            raw_payload=raw_payload or {},
        )
