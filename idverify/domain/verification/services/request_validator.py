"""
Domain Service: Request Validator

Checks that a verification request carries the fields its document type
needs before any provider is contacted.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from ..entities import DocumentType
from ..errors import ValidationError


class IVerificationRequest(Protocol):
    """Shape of a verification request as seen by the domain layer."""

    document_type: DocumentType
    document_number: Optional[str]
    claimed_first_name: Optional[str]
    claimed_last_name: Optional[str]
    date_of_birth: Optional[str]
    file_url: Optional[str]
    document_kind: Optional[str]
    metadata: Dict[str, Any]


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"date_of_birth must be an ISO date (YYYY-MM-DD), got {value!r}")


class RequestValidator:
    """
    Domain service for request-shape validation.

    Numbered documents need a document number and both claimed names and
    must not carry a file URL; NIN additionally needs a date of birth.
    Free-form documents need a file URL and a document kind and must not
    carry a document number.
    """

    def validate(self, request: IVerificationRequest) -> None:
        """
        Raise ValidationError describing every missing or conflicting field.
        """
        problems = self.collect_problems(request)
        if problems:
            raise ValidationError("; ".join(problems))

    def collect_problems(self, request: IVerificationRequest) -> List[str]:
        problems: List[str] = []
        document_type = request.document_type

        if document_type.requires_document_number:
            if _blank(request.document_number):
                problems.append("document_number is required")
            if not _blank(request.file_url):
                problems.append(f"file_url is not allowed for {document_type.value}")
            if _blank(request.claimed_first_name):
                problems.append("claimed_first_name is required")
            if _blank(request.claimed_last_name):
                problems.append("claimed_last_name is required")
        else:
            if _blank(request.file_url):
                problems.append("file_url is required")
            if not _blank(request.document_number):
                problems.append("document_number is not allowed for document uploads")
            if _blank(request.document_kind):
                problems.append("document_kind is required")

        if document_type == DocumentType.NIN and _blank(request.date_of_birth):
            problems.append("date_of_birth is required")

        if not _blank(request.date_of_birth):
            try:
                parse_iso_date(request.date_of_birth)
            except ValidationError as e:
                problems.append(str(e))

        return problems
