"""
Shared test fixtures and utilities for verification tests
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from idverify.application.dtos import VerificationRequest
from idverify.application.use_cases import VerificationOrchestrator
from idverify.config import clear_config_cache
from idverify.domain.verification.entities import (
    DocumentType,
    ProviderResponse,
    VerifiedIdentityRecord,
)
from idverify.domain.verification.services import RetryPolicy
from idverify.infrastructure.providers import ProviderRegistry

PROVIDER_METHODS = (
    "verify_nin",
    "verify_passport",
    "verify_drivers_license",
    "verify_voters_card",
    "verify_bvn",
    "verify_document",
    "check_status",
)


def create_mock_aiohttp_response(status=200, json_data=None, text_data="", json_error=None, body=b""):
    """
    Helper to create a properly mocked aiohttp response with async context managers.

    Args:
        status: HTTP status code
        json_data: Dictionary to return from response.json()
        text_data: String to return from response.text()
        json_error: Exception to raise from response.json()
        body: Bytes to return from response.read()

    Returns:
        Tuple of (mock_request_context, mock_response)
    """
    mock_response = MagicMock()
    mock_response.status = status

    if json_error is not None:
        mock_response.json = AsyncMock(side_effect=json_error)
    else:
        mock_response.json = AsyncMock(return_value=json_data)
    mock_response.text = AsyncMock(return_value=text_data)
    mock_response.read = AsyncMock(return_value=body)

    # Mock async context manager for session.get() / session.post()
    mock_request_context = AsyncMock()
    mock_request_context.__aenter__.return_value = mock_response
    mock_request_context.__aexit__.return_value = None

    return mock_request_context, mock_response


def create_mock_session(get=None, post=None):
    """
    Helper to create a mock aiohttp session.

    Each of `get` / `post` may be a request context, a list of contexts
    (returned in order), or an exception instance to raise.
    """
    mock_session = MagicMock()
    for method, value in (("get", get), ("post", post)):
        if value is None:
            continue
        mock_method = getattr(mock_session, method)
        if isinstance(value, BaseException):
            mock_method.side_effect = value
        elif isinstance(value, list):
            mock_method.side_effect = value
        else:
            mock_method.return_value = value
    return mock_session


def make_record(first="Ada", last="Lovelace", date_of_birth=None, reference="REF-001"):
    return VerifiedIdentityRecord(
        returned_first_name=first,
        returned_last_name=last,
        provider_reference_id=reference,
        date_of_birth=date_of_birth,
    )


def make_request(**overrides):
    fields = dict(
        document_type=DocumentType.PASSPORT,
        document_number="A01234567",
        claimed_first_name="Ada",
        claimed_last_name="Lovelace",
        provider_name="mock",
    )
    fields.update(overrides)
    return VerificationRequest(**fields)


@pytest.fixture(autouse=True)
def reset_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def mock_provider():
    """Provider double whose async operations are AsyncMocks."""
    provider = MagicMock()
    provider.name = "mock"
    for method in PROVIDER_METHODS:
        setattr(provider, method, AsyncMock(return_value=ProviderResponse.found(make_record())))
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def registry(mock_provider):
    return ProviderRegistry({"mock": lambda: mock_provider})


@pytest.fixture
def no_delay_retry():
    return RetryPolicy(max_retries=2, base_delay=0.0)


@pytest.fixture
def orchestrator(registry, no_delay_retry):
    return VerificationOrchestrator(
        registry=registry,
        retry_policy=no_delay_retry,
        call_timeout=1.0,
        default_provider="mock",
    )
