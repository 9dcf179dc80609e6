"""
Infrastructure: Dojah Provider

aiohttp adapter for the Dojah KYC API. Translates Dojah payloads into
ProviderResponse values at the boundary; no policy decisions here.
"""

import asyncio
import base64
import uuid
from typing import Any, AsyncContextManager, Callable, Dict, Optional

import aiohttp

from idverify.domain.verification.entities import ProviderResponse, VerifiedIdentityRecord
from idverify.domain.verification.errors import (
    ConfigurationError,
    NetworkError,
    ProviderError,
    ProviderTimeout,
)
from idverify.logging_utils import StructuredLogger
from .base_provider import BaseVerificationProvider

DEFAULT_BASE_URL = "https://api.dojah.io"

# Our document kinds -> Dojah document analysis types
DOCUMENT_KIND_MAP = {
    "nin": "nin_slip",
    "proof_of_address": "utility_bill",
}

PENDING_STATUSES = frozenset({"pending", "processing"})
COMPLETED_STATUSES = frozenset({"success", "completed"})


class DojahProvider(BaseVerificationProvider):
    """
    Dojah KYC adapter.

    One aiohttp.ClientSession is created lazily and reused for every call
    so the connection pool is shared by all verifications using this
    cached instance. Credentials are sent per request, never on the
    session, so document downloads from third-party URLs stay anonymous.
    """

    NIN_ENDPOINT = "/api/v1/kyc/nin"
    PASSPORT_ENDPOINT = "/api/v1/kyc/passport"
    DRIVERS_LICENSE_ENDPOINT = "/api/v1/kyc/drivers_license"
    VOTERS_CARD_ENDPOINT = "/api/v1/kyc/vin"
    BVN_ENDPOINT = "/api/v1/kyc/bvn"
    DOCUMENT_ENDPOINT = "/api/v1/document/analysis"
    STATUS_ENDPOINT = "/api/v1/kyc/status/{reference_id}"

    def __init__(
        self,
        api_key: Optional[str],
        app_id: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize Dojah adapter.

        Args:
            api_key: Dojah secret key (Authorization header)
            app_id: Dojah application ID (AppId header)
            base_url: API root
            timeout: Total timeout per HTTP call in seconds
            session: Optional pre-built session (owned by the caller)
            logger: Optional structured logger

        Raises:
            ConfigurationError: If credentials are missing
        """
        if not api_key or not app_id:
            raise ConfigurationError("Dojah requires DOJAH_API_KEY and DOJAH_APP_ID")

        super().__init__(logger)
        self._api_key = api_key
        self._app_id = app_id
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, dojah_config: Dict[str, Any]) -> "DojahProvider":
        return cls(
            api_key=dojah_config.get("api_key"),
            app_id=dojah_config.get("app_id"),
            base_url=dojah_config.get("base_url", DEFAULT_BASE_URL),
            timeout=float(dojah_config.get("timeout", 30.0)),
        )

    @property
    def name(self) -> str:
        return "dojah"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._api_key,
            "AppId": self._app_id,
            "Content-Type": "application/json",
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    # ------------------------------------------------------------------
    # Verify operations
    # ------------------------------------------------------------------

    async def verify_nin(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: str,
    ) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name,
            last_name=last_name, date_of_birth=date_of_birth,
        )
        data = await self._get(self.NIN_ENDPOINT, {"nin": document_number}, "dojah_nin")
        return self._lookup_response(data, "NIN")

    async def verify_passport(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
    ) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name, last_name=last_name,
        )
        data = await self._get(
            self.PASSPORT_ENDPOINT, {"passport_number": document_number}, "dojah_passport",
        )
        return self._lookup_response(data, "PASSPORT")

    async def verify_drivers_license(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name, last_name=last_name,
        )
        params = {"license_number": document_number}
        if date_of_birth:
            params["dob"] = date_of_birth
        data = await self._get(self.DRIVERS_LICENSE_ENDPOINT, params, "dojah_drivers_license")
        return self._lookup_response(data, "DL")

    async def verify_voters_card(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
    ) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name, last_name=last_name,
        )
        data = await self._get(self.VOTERS_CARD_ENDPOINT, {"vin": document_number}, "dojah_vin")
        return self._lookup_response(data, "VIN")

    async def verify_bvn(
        self,
        document_number: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ProviderResponse:
        self._validate_fields(
            document_number=document_number, first_name=first_name, last_name=last_name,
        )
        params = {"bvn": document_number, "first_name": first_name, "last_name": last_name}
        if date_of_birth:
            params["dob"] = date_of_birth
        data = await self._get(self.BVN_ENDPOINT, params, "dojah_bvn")

        # Validation endpoint answers per field; an unknown BVN has a falsy bvn.status
        entity = (data or {}).get("entity") or {}
        bvn_check = entity.get("bvn")
        if isinstance(bvn_check, dict) and not bvn_check.get("status"):
            return ProviderResponse.no_record(data.get("reference_id"), raw_payload=data)
        return self._lookup_response(data, "BVN")

    async def verify_document(
        self,
        document_kind: str,
        file_url: str,
        metadata: Dict[str, Any],
    ) -> ProviderResponse:
        self._validate_fields(document_kind=document_kind, file_url=file_url)

        image = await self._download(file_url)
        payload = {
            "document_image": base64.b64encode(image).decode("ascii"),
            "document_type": DOCUMENT_KIND_MAP.get(document_kind, document_kind),
        }
        data = await self._post(self.DOCUMENT_ENDPOINT, payload, "dojah_document")
        entity = (data or {}).get("entity")
        if not entity:
            return ProviderResponse.no_record(
                (data or {}).get("reference_id"), raw_payload=data,
            )

        first = self._text(entity.get("first_name"))
        last = self._text(entity.get("last_name"))
        full_name = self._text(entity.get("full_name"))
        if full_name and not (first or last):
            parts = full_name.split()
            first = parts[0]
            last = parts[-1] if len(parts) > 1 else ""

        record = VerifiedIdentityRecord(
            returned_first_name=first,
            returned_last_name=last,
            provider_reference_id=data.get("reference_id") or self._new_reference("DOC"),
            raw_payload=data,
            date_of_birth=self._text(entity.get("date_of_birth")) or None,
        )
        return ProviderResponse.found(record)

    async def check_status(self, provider_reference_id: str) -> ProviderResponse:
        self._validate_fields(provider_reference_id=provider_reference_id)
        endpoint = self.STATUS_ENDPOINT.format(reference_id=provider_reference_id)
        data = await self._get(endpoint, None, "dojah_status")

        if data is None:
            raise ProviderError(f"Unknown Dojah reference: {provider_reference_id}", status_code=404)

        status = str(data.get("status", "")).lower()
        if status in PENDING_STATUSES:
            return ProviderResponse.pending(provider_reference_id, raw_payload=data)

        if status in COMPLETED_STATUSES:
            entity = data.get("entity")
            if not entity:
                # Job finished and the source holds no matching identity
                return ProviderResponse.no_record(provider_reference_id, raw_payload=data)
            record = self._record_from_entity(entity, data, provider_reference_id)
            return ProviderResponse.found(record)

        raise ProviderError(
            f"Dojah verification {provider_reference_id} ended with status {status or 'unknown'!r}"
        )

    # ------------------------------------------------------------------
    # Payload translation
    # ------------------------------------------------------------------

    @staticmethod
    def _text(value: Any) -> str:
        """Dojah nests some fields as {"value": ..., "status": ...}."""
        if isinstance(value, dict):
            value = value.get("value")
        return str(value).strip() if value is not None else ""

    def _lookup_response(self, data: Optional[Dict[str, Any]], prefix: str) -> ProviderResponse:
        if data is None:
            return ProviderResponse.no_record()
        entity = data.get("entity")
        if not entity:
            return ProviderResponse.no_record(data.get("reference_id"), raw_payload=data)
        reference = data.get("reference_id") or self._new_reference(prefix)
        return ProviderResponse.found(self._record_from_entity(entity, data, reference))

    def _record_from_entity(
        self,
        entity: Dict[str, Any],
        data: Dict[str, Any],
        reference: str,
    ) -> VerifiedIdentityRecord:
        middle = self._text(entity.get("middlename") or entity.get("middle_name"))
        date_of_birth = self._text(entity.get("birthdate") or entity.get("date_of_birth"))
        return VerifiedIdentityRecord(
            returned_first_name=self._text(entity.get("firstname") or entity.get("first_name")),
            returned_last_name=self._text(entity.get("surname") or entity.get("last_name")),
            provider_reference_id=reference,
            raw_payload=data,
            returned_middle_name=middle or None,
            date_of_birth=date_of_birth or None,
        )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _get(
        self,
        endpoint: str,
        params: Optional[Dict[str, str]],
        message_type: str,
    ) -> Optional[Dict[str, Any]]:
        session = self._get_session()
        url = f"{self._base_url}{endpoint}"
        return await self._send(
            lambda: session.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ),
            message_type,
            params or {},
        )

    async def _post(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        message_type: str,
    ) -> Optional[Dict[str, Any]]:
        session = self._get_session()
        url = f"{self._base_url}{endpoint}"
        return await self._send(
            lambda: session.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ),
            message_type,
            payload,
        )

    async def _send(
        self,
        open_request: Callable[[], AsyncContextManager[aiohttp.ClientResponse]],
        message_type: str,
        payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Execute one Dojah call and classify the outcome.

        Returns:
            Decoded JSON body, or None when Dojah answers 404 (no record)

        Raises:
            ProviderError, NetworkError, ProviderTimeout
        """
        trace_id = str(uuid.uuid4())
        self._log_call(trace_id, "request", message_type, payload)

        try:
            async with open_request() as response:
                status = response.status

                if status == 404:
                    self._log_call(trace_id, "response", message_type, {}, {"status": status})
                    return None
                if status in (401, 403):
                    raise ProviderError(
                        f"Dojah rejected credentials (HTTP {status})", status_code=status,
                    )
                if status == 429:
                    raise ProviderError(
                        "Dojah rate limit exceeded", transient=True, status_code=status,
                    )
                if status >= 500:
                    raise NetworkError(f"Dojah unavailable (HTTP {status})")
                if status >= 400:
                    error_text = await response.text()
                    raise ProviderError(
                        f"Dojah HTTP {status}: {error_text[:200]}", status_code=status,
                    )

                try:
                    data = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise ProviderError(f"Malformed Dojah response: {e}") from e

        except asyncio.TimeoutError as e:
            raise ProviderTimeout(f"Dojah did not respond within {self._timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"HTTP Client Error: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected Dojah response type: {type(data).__name__}")

        self._log_call(trace_id, "response", message_type, data, {"status": status})
        return data

    async def _download(self, file_url: str) -> bytes:
        session = self._get_session()
        try:
            async with session.get(
                file_url, timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                if response.status != 200:
                    raise ProviderError(
                        f"Could not download document (HTTP {response.status})",
                        transient=response.status >= 500,
                        status_code=response.status,
                    )
                return await response.read()
        except asyncio.TimeoutError as e:
            raise ProviderTimeout(f"Document download exceeded {self._timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Document download failed: {e}") from e
