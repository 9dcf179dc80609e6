"""
Domain Entity: DocumentType

Government identity documents and free-form proofs accepted for verification.
"""

from enum import Enum


class DocumentType(str, Enum):
    NIN = "nin"
    PASSPORT = "passport"
    DRIVERS_LICENSE = "drivers_license"
    VOTERS_CARD = "voters_card"
    BVN = "bvn"
    # Free-form uploads (utility bills, proof of address)
    DOCUMENT = "document"

    @property
    def requires_document_number(self) -> bool:
        return self in NUMBERED_DOCUMENT_TYPES


NUMBERED_DOCUMENT_TYPES = frozenset({
    DocumentType.NIN,
    DocumentType.PASSPORT,
    DocumentType.DRIVERS_LICENSE,
    DocumentType.VOTERS_CARD,
    DocumentType.BVN,
})
