"""
Infrastructure: Base Verification Provider

Common plumbing shared by concrete vendor adapters.
"""

import uuid
from typing import Any, Dict, Optional

from idverify.application.interfaces import VerificationProvider
from idverify.domain.verification.errors import ValidationError
from idverify.logging_utils import StructuredLogger
from idverify.models import ComponentType


class BaseVerificationProvider(VerificationProvider):
    """
    Base adapter with field validation and reference generation.

    Subclasses implement the vendor calls; they must call
    _validate_fields before any network traffic.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or StructuredLogger(ComponentType.PROVIDER)

    @staticmethod
    def _validate_fields(**fields: Any) -> None:
        """Raise ValidationError naming the first blank field."""
        for key, value in fields.items():
            if value is None or not str(value).strip():
                raise ValidationError(f"{key} is required")

    @staticmethod
    def _new_reference(prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"

    @staticmethod
    def _mask(value: str) -> str:
        """Keep the first three characters of an identifier for log correlation."""
        return f"{value[:3]}***" if value else ""

    def _log_call(
        self,
        trace_id: str,
        direction: str,
        message_type: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger.log_message(
            trace_id=trace_id,
            direction=direction,
            message_type=message_type,
            payload=payload,
            metadata={"provider": self.name, **(metadata or {})},
        )
