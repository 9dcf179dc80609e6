"""
Unit tests for VerificationRequest / VerificationResult DTOs
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from idverify.application.dtos import VerificationRequest, VerificationResult
from idverify.domain.verification.entities import DocumentType, VerificationStatus
from idverify.domain.verification.errors import ErrorKind, NetworkError


class TestVerificationRequest:

    def test_generates_trace_id(self):
        a = VerificationRequest(document_type=DocumentType.PASSPORT)
        b = VerificationRequest(document_type=DocumentType.PASSPORT)
        assert a.trace_id and a.trace_id != b.trace_id

    def test_is_immutable(self):
        request = VerificationRequest(document_type=DocumentType.NIN)
        with pytest.raises(PydanticValidationError):
            request.document_number = "123"

    def test_accepts_string_document_type(self):
        request = VerificationRequest(document_type="voters_card")
        assert request.document_type == DocumentType.VOTERS_CARD


class TestVerificationResult:

    def test_verified_result(self):
        result = VerificationResult(status=VerificationStatus.VERIFIED, confidence=95)
        assert result.is_terminal
        assert result.checked_at.tzinfo is not None

    def test_verified_requires_confidence(self):
        with pytest.raises(PydanticValidationError, match="confidence is required"):
            VerificationResult(status=VerificationStatus.VERIFIED)

    @pytest.mark.parametrize("confidence", [-1, 101])
    def test_confidence_bounds(self, confidence):
        with pytest.raises(PydanticValidationError):
            VerificationResult(status=VerificationStatus.REJECTED, confidence=confidence)

    def test_failed_requires_error_kind(self):
        with pytest.raises(PydanticValidationError):
            VerificationResult(status=VerificationStatus.FAILED)

    def test_error_kind_only_on_failed(self):
        with pytest.raises(PydanticValidationError):
            VerificationResult(
                status=VerificationStatus.REJECTED,
                error_kind=ErrorKind.NETWORK_ERROR,
            )

    def test_pending_has_no_confidence(self):
        with pytest.raises(PydanticValidationError):
            VerificationResult(status=VerificationStatus.PENDING, confidence=50)
        assert not VerificationResult(status=VerificationStatus.PENDING).is_terminal

    def test_failed_factory(self):
        result = VerificationResult.failed(
            NetworkError("connection reset"),
            provider_name="dojah",
            trace_id="trace-1",
            attempts=3,
        )
        assert result.status == VerificationStatus.FAILED
        assert result.error_kind == ErrorKind.NETWORK_ERROR
        assert result.error_message == "connection reset"
        assert result.confidence is None
        assert result.attempts == 3

    def test_serializes_to_json(self):
        result = VerificationResult(
            status=VerificationStatus.NEEDS_REVIEW,
            confidence=80,
            provider_name="sandbox",
            document_type=DocumentType.NIN,
        )
        data = json.loads(result.model_dump_json())
        assert data["status"] == "needs_review"
        assert data["document_type"] == "nin"
        assert data["error_kind"] is None
