"""
Infrastructure: Sandbox Provider

Deterministic in-memory provider for development and end-to-end tests.
The same document number always yields the same answer, so flows can
be exercised without vendor credentials.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from idverify.domain.verification.entities import (
    DocumentType,
    ProviderResponse,
    VerifiedIdentityRecord,
)
from idverify.domain.verification.errors import ProviderError
from idverify.logging_utils import StructuredLogger
from .base_provider import BaseVerificationProvider

RecordKey = Tuple[DocumentType, str]


@dataclass(frozen=True)
class SandboxIdentity:
    """Fixture identity held by the sandbox data source."""
    first_name: str
    last_name: str
    date_of_birth: Optional[str] = None
    middle_name: Optional[str] = None


class SandboxProvider(BaseVerificationProvider):
    """
    Fixture-backed provider.

    In asynchronous mode every verify call returns PENDING with a fresh
    reference; check_status answers PENDING for `polls_until_resolved`
    polls and then the terminal answer on every later poll.
    """

    def __init__(
        self,
        records: Optional[Dict[RecordKey, SandboxIdentity]] = None,
        documents: Optional[Dict[str, SandboxIdentity]] = None,
        asynchronous: bool = False,
        polls_until_resolved: int = 1,
        latency: float = 0.0,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize sandbox.

        Args:
            records: (document type, number) -> identity
            documents: file URL -> identity extracted from that document
            asynchronous: Answer verify calls with PENDING references
            polls_until_resolved: PENDING polls before the terminal answer
            latency: Simulated vendor latency per call (seconds)
            logger: Optional structured logger
        """
        if polls_until_resolved < 0:
            raise ValueError("polls_until_resolved must be >= 0")
        if latency < 0:
            raise ValueError("latency must be >= 0")

        super().__init__(logger)
        self._records: Dict[RecordKey, SandboxIdentity] = {}
        for (document_type, number), identity in (records or {}).items():
            self.add_record(document_type, number, identity)
        self._documents: Dict[str, SandboxIdentity] = dict(documents or {})
        self._asynchronous = asynchronous
        self._polls_until_resolved = polls_until_resolved
        self._latency = latency
        # reference -> [polls remaining, terminal response]
        self._pending: Dict[str, List[Any]] = {}

    @classmethod
    def from_config(cls, sandbox_config: Dict[str, Any]) -> "SandboxProvider":
        """Build from the `providers.sandbox` configuration section."""
        records = {}
        for entry in sandbox_config.get("records") or []:
            key = (DocumentType(entry["document_type"]), str(entry["document_number"]))
            records[key] = SandboxIdentity(
                first_name=entry.get("first_name", ""),
                last_name=entry.get("last_name", ""),
                date_of_birth=entry.get("date_of_birth"),
                middle_name=entry.get("middle_name"),
            )

        documents = {}
        for entry in sandbox_config.get("documents") or []:
            documents[entry["file_url"]] = SandboxIdentity(
                first_name=entry.get("first_name", ""),
                last_name=entry.get("last_name", ""),
                date_of_birth=entry.get("date_of_birth"),
            )

        return cls(
            records=records,
            documents=documents,
            asynchronous=bool(sandbox_config.get("asynchronous", False)),
            polls_until_resolved=int(sandbox_config.get("polls_until_resolved", 1)),
            latency=float(sandbox_config.get("latency", 0.0)),
        )

    @property
    def name(self) -> str:
        return "sandbox"

    @staticmethod
    def _normalize_number(number: str) -> str:
        return str(number).strip().upper()

    def add_record(self, document_type: DocumentType, document_number: str, identity: SandboxIdentity) -> None:
        self._records[(DocumentType(document_type), self._normalize_number(document_number))] = identity

    async def verify_nin(self, document_number, first_name, last_name, date_of_birth) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name,
            last_name=last_name, date_of_birth=date_of_birth,
        )
        return await self._lookup(DocumentType.NIN, document_number, "NIN")

    async def verify_passport(self, document_number, first_name, last_name) -> ProviderResponse:
        self._validate_fields(document_number=document_number, first_name=first_name, last_name=last_name)
        return await self._lookup(DocumentType.PASSPORT, document_number, "PASSPORT")

    async def verify_drivers_license(self, document_number, first_name, last_name, date_of_birth=None) -> ProviderResponse:
        self._validate_fields(document_number=document_number, first_name=first_name, last_name=last_name)
        return await self._lookup(DocumentType.DRIVERS_LICENSE, document_number, "DL")

    async def verify_voters_card(self, document_number, first_name, last_name) -> ProviderResponse:
        self._validate_fields(document_number=document_number, first_name=first_name, last_name=last_name)
        return await self._lookup(DocumentType.VOTERS_CARD, document_number, "VIN")

    async def verify_bvn(self, document_number, first_name, last_name, date_of_birth=None) -> ProviderResponse:
        self._validate_fields(document_number=document_number, first_name=first_name, last_name=last_name)
        return await self._lookup(DocumentType.BVN, document_number, "BVN")

    async def verify_document(self, document_kind, file_url, metadata) -> ProviderResponse:
        self._validate_fields(document_kind=document_kind, file_url=file_url)
        await self._simulate_latency()

        reference = self._new_reference("DOC")
        identity = self._documents.get(file_url)
        if identity is None:
            response = ProviderResponse.no_record(reference, raw_payload={"file_url": file_url})
        else:
            response = ProviderResponse.found(self._to_record(identity, reference, {
                "document_kind": document_kind,
                "file_url": file_url,
            }))
        return self._respond(reference, response)

    async def check_status(self, provider_reference_id: str) -> ProviderResponse:
        self._validate_fields(provider_reference_id=provider_reference_id)
        await self._simulate_latency()

        entry = self._pending.get(provider_reference_id)
        if entry is None:
            raise ProviderError(f"Unknown sandbox reference: {provider_reference_id}")

        if entry[0] > 0:
            entry[0] -= 1
            return ProviderResponse.pending(provider_reference_id)
        return entry[1]

    async def _simulate_latency(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def _lookup(self, document_type: DocumentType, document_number: str, prefix: str) -> ProviderResponse:
        await self._simulate_latency()

        reference = self._new_reference(prefix)
        identity = self._records.get((document_type, self._normalize_number(document_number)))
        if identity is None:
            response = ProviderResponse.no_record(reference)
        else:
            response = ProviderResponse.found(self._to_record(identity, reference, {
                "document_type": document_type.value,
            }))
        return self._respond(reference, response)

    def _respond(self, reference: str, response: ProviderResponse) -> ProviderResponse:
        if not self._asynchronous:
            return response
        # Only mutated between awaits, so safe on a single event loop
        self._pending[reference] = [self._polls_until_resolved, response]
        return ProviderResponse.pending(reference)

    @staticmethod
    def _to_record(identity: SandboxIdentity, reference: str, raw: Dict[str, Any]) -> VerifiedIdentityRecord:
        return VerifiedIdentityRecord(
            returned_first_name=identity.first_name,
            returned_last_name=identity.last_name,
            provider_reference_id=reference,
            raw_payload={"source": "sandbox", **raw},
            returned_middle_name=identity.middle_name,
            date_of_birth=identity.date_of_birth,
        )
