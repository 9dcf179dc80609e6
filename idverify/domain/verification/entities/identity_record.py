"""
Domain Entity: VerifiedIdentityRecord

Normalized identity returned by a provider after a successful lookup.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class VerifiedIdentityRecord:
    """
    Identity as held by the external data source.

    raw_payload keeps the untouched vendor response for audit; the
    matcher and orchestrator never read it.
    """

    returned_first_name: str
    returned_last_name: str
    provider_reference_id: str
    raw_payload: Dict[str, Any] = field(default_factory=dict, compare=False)
    returned_middle_name: Optional[str] = None
    date_of_birth: Optional[str] = None  # ISO YYYY-MM-DD when the source holds it

    @property
    def has_name(self) -> bool:
        return bool(self.returned_first_name.strip() or self.returned_last_name.strip())
