"""Supported document types and their static classification profiles."""

from dataclasses import dataclass
from enum import StrEnum


class DocumentType(StrEnum):
    """Supported document types.

    Declaration order is significant: classification ties resolve to the
    type declared first.
    """

    AADHAAR = "aadhaar"
    PAN = "pan"
    VOTER_ID = "voter_id"
    DRIVING_LICENSE = "driving_license"
    PASSPORT = "passport"
    NATIONAL_ID = "national_id"
    GLOBAL_DRIVER_LICENSE = "global_driver_license"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    INVOICE = "invoice"
    RECEIPT = "receipt"
    HEALTH_INSURANCE = "health_insurance"
    LAB_REPORT = "lab_report"
    GENERIC = "generic"

    @property
    def profile(self) -> "DocumentTypeProfile":
        return DOCUMENT_PROFILES[self]

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def keywords(self) -> tuple[str, ...]:
        return self.profile.keywords

    @property
    def recommended_confidence_threshold(self) -> float:
        return self.profile.confidence_threshold

    @property
    def is_indian_document(self) -> bool:
        return self in _INDIAN_TYPES

    @property
    def is_identity_document(self) -> bool:
        return self in _IDENTITY_TYPES

    @property
    def is_financial_document(self) -> bool:
        return self in _FINANCIAL_TYPES

    @property
    def is_healthcare_document(self) -> bool:
        return self in _HEALTHCARE_TYPES

    @property
    def contains_pii(self) -> bool:
        return self is not DocumentType.GENERIC

    @classmethod
    def from_identifier(cls, identifier: str) -> "DocumentType":
        """Look up a type by its identifier, case-insensitively.

        Raises:
            ValueError: If no type has that identifier.
        """
        return cls(identifier.strip().lower())


@dataclass(frozen=True)
class DocumentTypeProfile:
    """Static per-type data used by classification and the confidence gate."""

    display_name: str
    keywords: tuple[str, ...]
    confidence_threshold: float = 0.75


_CARD_KEYWORDS = (
    "visa",
    "mastercard",
    "rupay",
    "american express",
    "discover",
    "valid thru",
    "expires",
)

DOCUMENT_PROFILES: dict[DocumentType, DocumentTypeProfile] = {
    DocumentType.AADHAAR: DocumentTypeProfile(
        "Aadhaar Card",
        (
            "government of india",
            "unique identification",
            "aadhaar",
            "uid",
            "uidai",
        ),
        0.85,
    ),
    DocumentType.PAN: DocumentTypeProfile(
        "PAN Card",
        (
            "income tax department",
            "permanent account number",
            "pan",
            "govt of india",
        ),
        0.85,
    ),
    DocumentType.VOTER_ID: DocumentTypeProfile(
        "Voter ID",
        ("election commission", "voter", "electoral", "electors"),
    ),
    DocumentType.DRIVING_LICENSE: DocumentTypeProfile(
        "Driving License",
        ("driving licence", "driving license", "transport", "motor vehicle"),
    ),
    DocumentType.PASSPORT: DocumentTypeProfile(
        "Passport",
        ("passport", "republic of", "government", "immigration"),
        0.85,
    ),
    DocumentType.NATIONAL_ID: DocumentTypeProfile("National ID", ()),
    DocumentType.GLOBAL_DRIVER_LICENSE: DocumentTypeProfile(
        "Driver License (Global)", ()
    ),
    DocumentType.CREDIT_CARD: DocumentTypeProfile("Credit Card", _CARD_KEYWORDS, 0.90),
    DocumentType.DEBIT_CARD: DocumentTypeProfile("Debit Card", _CARD_KEYWORDS, 0.90),
    DocumentType.INVOICE: DocumentTypeProfile(
        "Invoice",
        ("invoice", "bill", "amount", "total", "tax", "gst"),
    ),
    DocumentType.RECEIPT: DocumentTypeProfile(
        "Receipt",
        ("receipt", "paid", "transaction", "amount", "total"),
    ),
    DocumentType.HEALTH_INSURANCE: DocumentTypeProfile(
        "Health Insurance Card",
        ("health", "insurance", "medical", "member", "policy"),
        0.80,
    ),
    DocumentType.LAB_REPORT: DocumentTypeProfile(
        "Lab Report",
        ("laboratory", "lab", "test", "report", "patient", "result"),
        0.80,
    ),
    DocumentType.GENERIC: DocumentTypeProfile("Generic Document", ()),
}

_INDIAN_TYPES = frozenset(
    {
        DocumentType.AADHAAR,
        DocumentType.PAN,
        DocumentType.VOTER_ID,
        DocumentType.DRIVING_LICENSE,
    }
)

_IDENTITY_TYPES = _INDIAN_TYPES | {
    DocumentType.PASSPORT,
    DocumentType.NATIONAL_ID,
    DocumentType.GLOBAL_DRIVER_LICENSE,
}

_FINANCIAL_TYPES = frozenset(
    {
        DocumentType.CREDIT_CARD,
        DocumentType.DEBIT_CARD,
        DocumentType.INVOICE,
        DocumentType.RECEIPT,
    }
)

_HEALTHCARE_TYPES = frozenset({DocumentType.HEALTH_INSURANCE, DocumentType.LAB_REPORT})
