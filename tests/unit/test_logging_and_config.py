"""
Unit tests for structured logging, payload redaction and configuration loading
"""

import json

import pytest
from unittest.mock import patch

from idverify import logging_utils
from idverify.config import clear_config_cache, get_idverify_config
from idverify.logging_utils import REDACTED, StructuredLogger, get_logger, redact_payload
from idverify.models import ComponentType, EventType


class TestRedaction:

    def test_masks_identity_numbers_and_credentials(self):
        payload = {
            "nin": "12345678901",
            "passport_number": "A01234567",
            "Authorization": "sk_live",
            "document_type": "passport",
        }

        redacted = redact_payload(payload)

        assert redacted["nin"] == REDACTED
        assert redacted["passport_number"] == REDACTED
        assert redacted["Authorization"] == REDACTED
        assert redacted["document_type"] == "passport"
        # Original payload is not mutated
        assert payload["nin"] == "12345678901"

    def test_masks_personal_names_and_birth_dates(self):
        payload = {
            "first_name": "Ada",
            "lastname": "Lovelace",
            "entity": {"surname": "Lovelace", "middlename": "Augusta", "birthdate": "1815-12-10"},
            "params": {"dob": "1815-12-10"},
        }

        redacted = redact_payload(payload)

        assert redacted["first_name"] == REDACTED
        assert redacted["lastname"] == REDACTED
        assert redacted["entity"] == {
            "surname": REDACTED,
            "middlename": REDACTED,
            "birthdate": REDACTED,
        }
        assert redacted["params"]["dob"] == REDACTED
        assert "Ada" not in json.dumps(redacted)

    def test_recurses_into_nested_structures(self):
        payload = {"params": {"bvn": "222"}, "items": [{"document_image": "base64..."}]}

        redacted = redact_payload(payload)

        assert redacted["params"]["bvn"] == REDACTED
        assert redacted["items"][0]["document_image"] == REDACTED


class TestStructuredLogger:

    def test_get_logger_does_not_stack_handlers(self):
        first = get_logger("idverify-test")
        second = get_logger("idverify-test")

        assert first is second
        assert len(second.handlers) == 1

    def test_log_event_emits_redacted_entry(self):
        logger = StructuredLogger(ComponentType.ORCHESTRATOR)

        with patch.object(logger.logger, "info") as mock_info:
            logger.log_event("trace-1", EventType.VERIFICATION_RECEIVED, {
                "document_number": "12345678901",
                "document_type": "nin",
            }, metrics={"attempt": 1})

        entry = json.loads(mock_info.call_args[0][0])
        assert entry["trace_id"] == "trace-1"
        assert entry["component"] == "VerificationOrchestrator"
        assert entry["event_type"] == "Verification_Received"
        assert entry["metrics"] == {"attempt": 1}
        assert "12345678901" not in entry["message"]

    def test_log_message_truncates_large_payloads(self):
        logger = StructuredLogger(ComponentType.PROVIDER)

        with patch.object(logging_utils, "MAX_PAYLOAD_SIZE_BYTES", 32), \
                patch.object(logger.logger, "info") as mock_info:
            logger.log_message("trace-2", "response", "dojah_nin", {"entity": {"address": "A" * 100}})

        entry = json.loads(mock_info.call_args[0][0])
        assert entry["truncated"] is True
        assert len(entry["response_payload"]) == 32

    def test_log_message_hash_only_mode(self):
        logger = StructuredLogger(ComponentType.PROVIDER)

        with patch.object(logging_utils, "ENABLE_FULL_PAYLOAD_LOGGING", False), \
                patch.object(logger.logger, "info") as mock_info:
            logger.log_message("trace-3", "request", "dojah_nin", {"nin": "123"})

        entry = json.loads(mock_info.call_args[0][0])
        assert "payload_hash" in entry
        assert "request_payload" not in entry


class TestConfig:

    def test_packaged_defaults(self):
        config = get_idverify_config()

        assert config["policy"]["accept_threshold"] == 90
        assert config["policy"]["review_threshold"] == 70
        assert config["retry"]["max_retries"] == 2
        assert config["timeouts"]["call_timeout"] == 30.0
        assert config["providers"]["default"] == "dojah"

    def test_cached(self):
        assert get_idverify_config() is get_idverify_config()

    def test_explicit_path_replaces_cache(self, tmp_path):
        custom = tmp_path / "custom.yaml"
        custom.write_text("policy:\n  accept_threshold: 99\n")

        config = get_idverify_config(str(custom))

        assert config["policy"]["accept_threshold"] == 99
        assert get_idverify_config() is config
        clear_config_cache()
        assert get_idverify_config()["policy"]["accept_threshold"] == 90
