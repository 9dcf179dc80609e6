"""
VerificationOrchestrator

Core use case for verifying a claimed identity document.

Per request the flow is strictly sequential:
1. Validate the request shape for its document type
2. Resolve the provider through the registry
3. Dispatch to the matching verify operation (bounded by a timeout,
   retried with exponential backoff on transient failures)
4. Score the returned record against the claimed names
5. Map the confidence onto VERIFIED / NEEDS_REVIEW / REJECTED

Infrastructure failures always surface as FAILED with an error kind; they
are never folded into REJECTED, which is reserved for answers about the
identity itself.
"""

import asyncio
import uuid
from datetime import date
from typing import Awaitable, Callable, Optional, Tuple

from idverify.application.dtos import VerificationRequest, VerificationResult
from idverify.application.interfaces import IProviderRegistry, VerificationProvider
from idverify.domain.matching import NameMatcher
from idverify.domain.verification.entities import (
    DocumentType,
    ProviderOutcome,
    ProviderResponse,
    VerificationStatus,
)
from idverify.domain.verification.errors import (
    ConfigurationError,
    ProviderError,
    ProviderTimeout,
    ValidationError,
    VerificationError,
)
from idverify.domain.verification.services import RequestValidator, RetryPolicy, parse_iso_date
from idverify.logging_utils import StructuredLogger
from idverify.models import ComponentType, EventType


class _AttemptsExhausted(Exception):
    """Carries the last error and attempt count out of the retry loop."""

    def __init__(self, error: VerificationError, attempts: int):
        super().__init__(str(error))
        self.error = error
        self.attempts = attempts


class VerificationOrchestrator:
    """
    Entry point for identity verification.

    Design Principles:
    - No shared mutable state besides the injected registry's cache
    - All accept/reject/review policy lives here, never in adapters
    - Never raises for verification failures; cancellation propagates
    """

    def __init__(
        self,
        registry: IProviderRegistry,
        name_matcher: Optional[NameMatcher] = None,
        retry_policy: Optional[RetryPolicy] = None,
        call_timeout: float = 30.0,
        default_provider: str = "dojah",
        require_dob_match: bool = True,
        validator: Optional[RequestValidator] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize the orchestrator with injected dependencies.

        Args:
            registry: Resolves provider names to cached adapter instances
            name_matcher: Name scorer and threshold policy
            retry_policy: Backoff schedule for transient provider failures
            call_timeout: Deadline for a single provider call (seconds)
            default_provider: Provider used when a request names none
            require_dob_match: Downgrade VERIFIED to NEEDS_REVIEW when the
                claimed and returned dates of birth disagree
            validator: Request-shape validator
            logger: Optional structured logger (creates default if None)
        """
        if call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive, got {call_timeout}")

        self._registry = registry
        self._matcher = name_matcher or NameMatcher()
        self._retry_policy = retry_policy or RetryPolicy()
        self._call_timeout = call_timeout
        self._default_provider = default_provider
        self._require_dob_match = require_dob_match
        self._validator = validator or RequestValidator()
        self._logger = logger or StructuredLogger(ComponentType.ORCHESTRATOR)

    @property
    def name_matcher(self) -> NameMatcher:
        return self._matcher

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    async def verify(self, request: VerificationRequest) -> VerificationResult:
        """
        Verify one request end to end.

        Args:
            request: VerificationRequest DTO

        Returns:
            VerificationResult; PENDING when the provider answers asynchronously
        """
        trace_id = request.trace_id
        provider_name = (request.provider_name or self._default_provider).strip().lower()

        self._logger.log_event(trace_id, EventType.VERIFICATION_RECEIVED, {
            "document_type": request.document_type.value,
            "provider_name": provider_name,
        })

        try:
            self._validator.validate(request)
        except ValidationError as e:
            return self._fail(e, trace_id, provider_name, request.document_type)

        try:
            provider = self._registry.get_provider(provider_name)
        except ConfigurationError as e:
            return self._fail(e, trace_id, provider_name, request.document_type)

        self._logger.log_event(trace_id, EventType.PROVIDER_SELECTED, {
            "provider_name": provider.name,
            "document_type": request.document_type.value,
        })

        try:
            response, attempts = await self._call_with_retry(
                trace_id,
                provider.name,
                lambda: self._dispatch(provider, request),
            )
        except _AttemptsExhausted as exhausted:
            return self._fail(
                exhausted.error, trace_id, provider.name, request.document_type,
                attempts=exhausted.attempts,
            )

        result = self._conclude(
            response=response,
            provider_name=provider.name,
            trace_id=trace_id,
            attempts=attempts,
            request=request,
        )
        self._log_completion(result)
        return result

    async def check_status(
        self,
        provider_name: str,
        provider_reference_id: str,
        request: Optional[VerificationRequest] = None,
    ) -> VerificationResult:
        """
        Poll an asynchronous verification.

        The poll is delegated to the same cached provider instance that
        issued the reference. A resolved record is scored against the
        claimed names of `request` when supplied; without them the record
        cannot be compared and the result is NEEDS_REVIEW.

        Args:
            provider_name: Provider that returned the reference
            provider_reference_id: Reference from the PENDING result
            request: Original request, for its claimed names and trace ID

        Returns:
            VerificationResult (PENDING until the provider resolves)
        """
        trace_id = request.trace_id if request is not None else str(uuid.uuid4())
        document_type = request.document_type if request is not None else None
        provider_name = (provider_name or self._default_provider).strip().lower()

        if not provider_reference_id or not provider_reference_id.strip():
            return self._fail(
                ValidationError("provider_reference_id is required"),
                trace_id, provider_name, document_type,
            )

        try:
            provider = self._registry.get_provider(provider_name)
        except ConfigurationError as e:
            return self._fail(e, trace_id, provider_name, document_type)

        try:
            response, attempts = await self._call_with_retry(
                trace_id,
                provider.name,
                lambda: provider.check_status(provider_reference_id),
            )
        except _AttemptsExhausted as exhausted:
            return self._fail(
                exhausted.error, trace_id, provider.name, document_type,
                attempts=exhausted.attempts,
                provider_reference_id=provider_reference_id,
            )

        if response.provider_reference_id is None:
            response.provider_reference_id = provider_reference_id

        result = self._conclude(
            response=response,
            provider_name=provider.name,
            trace_id=trace_id,
            attempts=attempts,
            request=request,
        )

        self._logger.log_event(trace_id, EventType.STATUS_CHECKED, {
            "provider_name": provider.name,
            "provider_reference_id": provider_reference_id,
            "status": result.status.value,
        }, metrics={"attempts": attempts})
        return result

    def _dispatch(
        self,
        provider: VerificationProvider,
        request: VerificationRequest,
    ) -> Awaitable[ProviderResponse]:
        document_type = request.document_type
        number = request.document_number
        first = request.claimed_first_name
        last = request.claimed_last_name

        if document_type == DocumentType.NIN:
            return provider.verify_nin(number, first, last, request.date_of_birth)
        if document_type == DocumentType.PASSPORT:
            return provider.verify_passport(number, first, last)
        if document_type == DocumentType.DRIVERS_LICENSE:
            return provider.verify_drivers_license(number, first, last, request.date_of_birth)
        if document_type == DocumentType.VOTERS_CARD:
            return provider.verify_voters_card(number, first, last)
        if document_type == DocumentType.BVN:
            return provider.verify_bvn(number, first, last, request.date_of_birth)
        return provider.verify_document(request.document_kind, request.file_url, dict(request.metadata))

    async def _call_with_retry(
        self,
        trace_id: str,
        provider_name: str,
        call: Callable[[], Awaitable[ProviderResponse]],
    ) -> Tuple[ProviderResponse, int]:
        """
        Run `call` under the per-call timeout, retrying transient failures.

        Returns:
            (response, attempts made)

        Raises:
            _AttemptsExhausted: on a non-retryable error or when retries run out
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await asyncio.wait_for(call(), timeout=self._call_timeout)
                self._logger.log_event(trace_id, EventType.PROVIDER_CALL, {
                    "provider_name": provider_name,
                    "outcome": response.outcome.value,
                }, metrics={"attempt": attempt})
                return response, attempt
            except asyncio.TimeoutError:
                error = ProviderTimeout(
                    f"{provider_name} did not respond within {self._call_timeout}s"
                )
            except VerificationError as e:
                error = e
            except Exception as e:
                self._logger.logger.exception(
                    f"Unexpected error from provider {provider_name}: {e}"
                )
                error = ProviderError(f"Unexpected {type(e).__name__} from {provider_name}: {e}")

            if not self._retry_policy.should_retry(error, attempt):
                raise _AttemptsExhausted(error, attempt)

            delay = self._retry_policy.delay_for(attempt)
            self._logger.log_event(trace_id, EventType.RETRY_SCHEDULED, {
                "provider_name": provider_name,
                "error_kind": error.kind.value,
                "error": str(error),
            }, metrics={"attempt": attempt, "delay_s": delay})
            await asyncio.sleep(delay)

    def _conclude(
        self,
        response: ProviderResponse,
        provider_name: str,
        trace_id: str,
        attempts: int,
        request: Optional[VerificationRequest],
    ) -> VerificationResult:
        common = dict(
            provider_name=provider_name,
            provider_reference_id=response.provider_reference_id,
            trace_id=trace_id,
            document_type=request.document_type if request is not None else None,
            attempts=attempts,
        )

        if response.outcome == ProviderOutcome.PENDING:
            return VerificationResult(
                status=VerificationStatus.PENDING,
                message="Awaiting asynchronous provider result",
                **common,
            )

        if response.outcome == ProviderOutcome.NO_RECORD:
            return VerificationResult(
                status=VerificationStatus.REJECTED,
                message="No record found for the supplied document",
                **common,
            )

        record = response.record
        claimed_first = request.claimed_first_name if request is not None else None
        claimed_last = request.claimed_last_name if request is not None else None
        claimed_dob = request.date_of_birth if request is not None else None
        dob_match = self._compare_dates_of_birth(claimed_dob, record.date_of_birth)

        if not (claimed_first or claimed_last) or not record.has_name:
            return VerificationResult(
                status=VerificationStatus.NEEDS_REVIEW,
                date_of_birth_match=dob_match,
                message="No names available to compare; manual review required",
                **common,
            )

        confidence = self._matcher.score(
            claimed_first, claimed_last,
            record.returned_first_name, record.returned_last_name,
        )
        status = self._matcher.decide(confidence)
        message = f"Name match confidence {confidence}%"

        if status == VerificationStatus.VERIFIED and dob_match is False and self._require_dob_match:
            status = VerificationStatus.NEEDS_REVIEW
            message = f"Name match confidence {confidence}% but date of birth differs"

        return VerificationResult(
            status=status,
            confidence=confidence,
            date_of_birth_match=dob_match,
            message=message,
            **common,
        )

    @staticmethod
    def _compare_dates_of_birth(claimed: Optional[str], returned: Optional[str]) -> Optional[bool]:
        if not claimed or not returned:
            return None
        try:
            returned_date: date = parse_iso_date(returned)
            claimed_date: date = parse_iso_date(claimed)
        except ValidationError:
            # Vendor used a format we cannot read; leave the question open
            return None
        return claimed_date == returned_date

    def _fail(
        self,
        error: VerificationError,
        trace_id: str,
        provider_name: Optional[str],
        document_type: Optional[DocumentType],
        attempts: int = 0,
        provider_reference_id: Optional[str] = None,
    ) -> VerificationResult:
        result = VerificationResult.failed(
            error,
            provider_name=provider_name,
            trace_id=trace_id,
            document_type=document_type,
            attempts=attempts,
            provider_reference_id=provider_reference_id,
        )
        self._logger.log_event(trace_id, EventType.VERIFICATION_FAILED, {
            "provider_name": provider_name,
            "error_kind": error.kind.value,
            "error": str(error),
        }, metrics={"attempts": attempts})
        return result

    def _log_completion(self, result: VerificationResult) -> None:
        self._logger.log_event(result.trace_id, EventType.VERIFICATION_COMPLETED, {
            "provider_name": result.provider_name,
            "status": result.status.value,
            "provider_reference_id": result.provider_reference_id,
        }, metrics={
            "confidence": result.confidence,
            "attempts": result.attempts,
            "date_of_birth_match": result.date_of_birth_match,
        })
