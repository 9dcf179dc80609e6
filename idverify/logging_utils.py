import logging
import json
import os
import hashlib
import time
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from .models import LogEntry, ComponentType, EventType

# Configuration for full payload logging
ENABLE_FULL_PAYLOAD_LOGGING = os.getenv("ENABLE_FULL_PAYLOAD_LOGGING", "true").lower() == "true"
MAX_PAYLOAD_SIZE_BYTES = int(os.getenv("MAX_PAYLOAD_SIZE_BYTES", "100000"))

REDACTED = "***REDACTED***"

# Substring match against lower-cased keys
SENSITIVE_FIELDS = (
    "nin",
    "passport",
    "license_number",
    "vin",
    "bvn",
    "document_number",
    "document_image",
    "api_key",
    "apikey",
    "password",
    "token",
    "secret",
    "authorization",
    "first_name",
    "firstname",
    "last_name",
    "lastname",
    "surname",
    "middle_name",
    "middlename",
    "full_name",
    "date_of_birth",
    "birthdate",
    "dob",
)


def redact_payload(payload: Any) -> Any:
    """Return a copy of payload with identity numbers and credentials masked."""
    if isinstance(payload, dict):
        redacted = {}
        for key, value in payload.items():
            lower_key = str(key).lower()
            if any(field in lower_key for field in SENSITIVE_FIELDS):
                redacted[key] = REDACTED
            else:
                redacted[key] = redact_payload(value)
        return redacted
    if isinstance(payload, (list, tuple)):
        return [redact_payload(item) for item in payload]
    return payload


class IDVerifyJSONFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(IDVerifyJSONFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = time.time()
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def get_logger(name: str):
    logger = logging.getLogger(name)
    # Repeated lookups must not stack handlers
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = IDVerifyJSONFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


class StructuredLogger:
    def __init__(self, component: ComponentType):
        self.logger = get_logger(component.value)
        self.component = component

    def hash_payload(self, payload: Any) -> str:
        """Create a hash of the payload for audit."""
        dumped = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.md5(dumped.encode()).hexdigest()[:16]

    def log_event(self,
                  trace_id: str,
                  event_type: EventType,
                  payload: Any,
                  metrics: Dict[str, Any] = None):

        payload = redact_payload(payload)
        payload_hash = self.hash_payload(payload)

        entry = LogEntry(
            trace_id=trace_id,
            component=self.component,
            event_type=event_type,
            payload_hash=payload_hash,
            metrics=metrics or {},
            message=str(payload)[:200]
        )

        self.logger.info(json.dumps(entry.model_dump(), default=str))

    def log_message(self,
                    trace_id: str,
                    direction: str,
                    message_type: str,
                    payload: Dict[str, Any],
                    metadata: Optional[Dict] = None):
        """
        Log full message content with trace correlation.

        Args:
            trace_id: Trace ID for correlation
            direction: "request" | "response" | "internal"
            message_type: Descriptive message type (e.g., "dojah_nin", "sandbox_status")
            payload: Full message payload (request or response), redacted before output
            metadata: Additional metadata (e.g., endpoint, status code, timing)
        """
        payload = redact_payload(payload)

        if not ENABLE_FULL_PAYLOAD_LOGGING:
            # Fall back to hash-only logging
            self.logger.info(json.dumps({
                "trace_id": trace_id,
                "component": self.component.value,
                "direction": direction,
                "message_type": message_type,
                "payload_hash": self.hash_payload(payload),
                "metadata": metadata or {}
            }, default=str))
            return

        payload_str = json.dumps(payload, default=str)
        payload_size = len(payload_str.encode('utf-8'))

        truncated = False
        if payload_size > MAX_PAYLOAD_SIZE_BYTES:
            payload = payload_str[:MAX_PAYLOAD_SIZE_BYTES]
            truncated = True

        log_entry = {
            "trace_id": trace_id,
            "component": self.component.value,
            "direction": direction,
            "message_type": message_type,
            "content_size_bytes": payload_size,
            "truncated": truncated,
            "metadata": metadata or {}
        }

        if direction == "request":
            log_entry["request_payload"] = payload
        elif direction == "response":
            log_entry["response_payload"] = payload
        else:  # internal
            log_entry["internal_payload"] = payload

        self.logger.info(json.dumps(log_entry, default=str))
