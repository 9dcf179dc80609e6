"""
Integration test: full verification flow through the factory-built stack

Exercises configuration -> factory -> registry -> sandbox adapter ->
orchestrator without any network access.
"""

import copy

import pytest

from idverify import (
    DocumentType,
    ErrorKind,
    VerificationFactory,
    VerificationRequest,
    VerificationStatus,
)
from idverify.config import get_idverify_config


def sandbox_config(**sandbox_overrides):
    config = copy.deepcopy(get_idverify_config())
    config["providers"]["default"] = "sandbox"
    config["providers"]["sandbox"].update(sandbox_overrides)
    config["retry"]["base_delay"] = 0.0
    return config


@pytest.fixture
def orchestrator():
    return VerificationFactory.create_orchestrator(sandbox_config())


@pytest.mark.asyncio
async def test_nin_verified_end_to_end(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.NIN,
        document_number="12345678901",
        claimed_first_name="ada",
        claimed_last_name="LOVELACE",
        date_of_birth="1815-12-10",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.VERIFIED
    assert result.confidence == 100
    assert result.provider_name == "sandbox"
    assert result.date_of_birth_match is True
    assert result.provider_reference_id.startswith("NIN-")


@pytest.mark.asyncio
async def test_wrong_date_of_birth_needs_review(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.NIN,
        document_number="12345678901",
        claimed_first_name="Ada",
        claimed_last_name="Lovelace",
        date_of_birth="1990-01-01",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.NEEDS_REVIEW
    assert result.date_of_birth_match is False


@pytest.mark.asyncio
async def test_impostor_rejected(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.PASSPORT,
        document_number="A01234567",
        claimed_first_name="John",
        claimed_last_name="Doe",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.REJECTED
    assert result.confidence is not None


@pytest.mark.asyncio
async def test_unknown_document_rejected(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.VOTERS_CARD,
        document_number="00000000000000",
        claimed_first_name="Wole",
        claimed_last_name="Soyinka",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.REJECTED
    assert result.confidence is None


@pytest.mark.asyncio
async def test_document_upload_fixture(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.DOCUMENT,
        file_url="https://sandbox.idverify.local/documents/utility-bill-ada.pdf",
        document_kind="proof_of_address",
        claimed_first_name="Ada",
        claimed_last_name="Lovelace",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.VERIFIED


@pytest.mark.asyncio
async def test_dojah_without_credentials_fails_with_configuration_error(orchestrator):
    request = VerificationRequest(
        document_type=DocumentType.PASSPORT,
        document_number="A01234567",
        claimed_first_name="Chinua",
        claimed_last_name="Achebe",
        provider_name="dojah",
    )

    result = await orchestrator.verify(request)

    assert result.status == VerificationStatus.FAILED
    assert result.error_kind == ErrorKind.CONFIGURATION_ERROR


@pytest.mark.asyncio
async def test_asynchronous_provider_polling():
    orchestrator = VerificationFactory.create_orchestrator(
        sandbox_config(asynchronous=True, polls_until_resolved=1)
    )
    request = VerificationRequest(
        document_type=DocumentType.DRIVERS_LICENSE,
        document_number="ABC123456789",
        claimed_first_name="Ngozi",
        claimed_last_name="Adichie",
        date_of_birth="1977-09-15",
    )

    pending = await orchestrator.verify(request)
    assert pending.status == VerificationStatus.PENDING

    reference = pending.provider_reference_id
    still_pending = await orchestrator.check_status("sandbox", reference, request)
    assert still_pending.status == VerificationStatus.PENDING

    resolved = await orchestrator.check_status("sandbox", reference, request)
    assert resolved.status == VerificationStatus.VERIFIED
    assert resolved.provider_reference_id == reference
    assert resolved.trace_id == request.trace_id

    again = await orchestrator.check_status("SANDBOX", reference, request)
    assert again.status == VerificationStatus.VERIFIED
