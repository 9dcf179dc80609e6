"""
VerificationProvider Interface

Capability contract every identity-verification vendor adapter must satisfy.
The orchestrator depends on this abstraction, never on a concrete vendor.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from idverify.domain.verification.entities import ProviderResponse
from idverify.domain.verification.errors import ConfigurationError


class VerificationProvider(ABC):
    """
    Interface for identity-verification vendors (Dojah, Youverify, ...).

    IMPLEMENTATION REQUIREMENTS:

    1. **Fail fast**: every verify method validates that its required
       fields are non-empty and raises ValidationError before spending a
       vendor call on malformed input.

    2. **No policy**: adapters return the names held by the data source
       (ProviderResponse.found) or an explicit no-record answer
       (ProviderResponse.no_record). Accept/reject/review decisions belong
       to the orchestrator so that swapping vendors never changes policy.

    3. **Typed failures**: transport problems raise NetworkError, deadline
       overruns raise ProviderTimeout, vendor-side application failures
       raise ProviderError (transient=True only when retrying can help).

    4. **Concurrency**: instances are cached and shared across in-flight
       verifications and must be safe under concurrent use.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable registry name of this provider (e.g. 'dojah')."""
        pass

    @abstractmethod
    async def verify_nin(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: str,
    ) -> ProviderResponse:
        """
        Look up a National Identity Number.

        Args:
            document_number: NIN as printed on the slip
            first_name: Claimed first name
            last_name: Claimed last name
            date_of_birth: Claimed date of birth (YYYY-MM-DD)
        """
        pass

    @abstractmethod
    async def verify_passport(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
    ) -> ProviderResponse:
        """Look up an international passport."""
        pass

    @abstractmethod
    async def verify_drivers_license(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ProviderResponse:
        """Look up a driver's license; some vendors also want the date of birth."""
        pass

    @abstractmethod
    async def verify_voters_card(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
    ) -> ProviderResponse:
        """Look up a Voter Identification Number."""
        pass

    @abstractmethod
    async def verify_document(
        self,
        document_kind: str,
        file_url: str,
        metadata: Dict[str, Any],
    ) -> ProviderResponse:
        """
        Analyse an uploaded proof (utility bill, proof of address, ...).

        The adapter owns any download and OCR/extraction; it returns
        whatever names it could extract, possibly none.
        """
        pass

    @abstractmethod
    async def check_status(self, provider_reference_id: str) -> ProviderResponse:
        """
        Poll a previously returned reference.

        Must be idempotent: PENDING while the vendor is still working,
        then the same terminal answer on every subsequent call.
        """
        pass

    async def verify_bvn(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ProviderResponse:
        """Look up a Bank Verification Number. Optional capability."""
        raise ConfigurationError(f"Provider '{self.name}' does not support BVN verification")

    async def close(self) -> None:
        """Release pooled resources. No-op unless the adapter holds any."""
        pass
