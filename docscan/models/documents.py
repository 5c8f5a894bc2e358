"""Structured document records produced by the field extractors.

Every record is an immutable dataclass whose extracted values are
``FieldValue`` pairs of text and confidence. Required fields that were
not found hold a sentinel value with confidence 0.0; optional fields
that were not found are ``None``.
"""

from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any, ClassVar, Union

from docscan.models.document_type import DocumentType
from docscan.ocr.fragments import BoundingBox, TextFragment
from docscan.validation.masking import (
    mask_aadhaar_number,
    mask_card_number,
    mask_pan_number,
)
from docscan.validation.validators import is_valid_expiry_date

RAW_TEXT_SUMMARY_LIMIT = 200

PAN_CATEGORIES: dict[str, str] = {
    "P": "Individual",
    "C": "Company",
    "H": "Hindu Undivided Family",
    "F": "Firm",
    "A": "Association of Persons",
    "T": "Trust",
    "B": "Body of Individuals",
    "L": "Local Authority",
    "J": "Artificial Juridical Person",
    "G": "Government",
}

COUNTRY_NAMES: dict[str, str] = {
    "IND": "India",
    "USA": "United States",
    "GBR": "United Kingdom",
    "CAN": "Canada",
    "AUS": "Australia",
    "DEU": "Germany",
    "FRA": "France",
    "JPN": "Japan",
    "CHN": "China",
    "BRA": "Brazil",
}


@dataclass(frozen=True)
class FieldValue:
    """An extracted value and the confidence of its extraction."""

    value: str
    confidence: float

    @property
    def is_present(self) -> bool:
        return self.confidence is not None and self.confidence > 0

    @classmethod
    def missing(cls, label: str) -> "FieldValue":
        """Sentinel for a required field that was not detected."""
        return cls(f"{label} not detected", 0.0)


class DetectedFieldKind(StrEnum):
    """Kinds of fields picked out of loosely structured documents."""

    NAME = "name"
    NUMBER = "number"
    DATE = "date"
    ADDRESS = "address"
    PHONE = "phone"
    EMAIL = "email"
    AMOUNT = "amount"
    PERCENTAGE = "percentage"
    URL = "url"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return "URL" if self is DetectedFieldKind.URL else self.value.capitalize()


@dataclass(frozen=True)
class DetectedField:
    """A single field detected in a generic document."""

    value: str
    confidence: float
    kind: DetectedFieldKind = DetectedFieldKind.OTHER
    box: BoundingBox | None = None
    raw_text: str | None = None

    @property
    def has_high_confidence(self) -> bool:
        return self.confidence >= 0.8


_FIELD_VALUE_TYPES = (FieldValue, FieldValue | None)


def _field_confidence_mean(values: list[FieldValue | None]) -> float:
    scores = [v.confidence for v in values if v is not None and v.is_present]
    return sum(scores) / len(scores) if scores else 0.0


@dataclass(frozen=True)
class _FieldDocument:
    """Shared behaviour of records built from ``FieldValue`` pairs."""

    kind: ClassVar[str]
    contains_sensitive_data: ClassVar[bool] = True

    def field_values(self) -> dict[str, FieldValue | None]:
        """Return every ``FieldValue`` attribute by name, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.type in _FIELD_VALUE_TYPES
        }

    @property
    def overall_confidence(self) -> float:
        """Mean confidence of the fields that were actually detected."""
        return _field_confidence_mean(list(self.field_values().values()))

    def _masked_values(self) -> dict[str, str]:
        return {}

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        """Render the record as a JSON-friendly mapping.

        Args:
            mask_sensitive: Replace identifier numbers by their masked form.

        Returns:
            Mapping with ``kind``, ``overall_confidence`` and one
            ``{"value", "confidence"}`` entry per field.
        """
        masked = self._masked_values() if mask_sensitive else {}
        out: dict[str, Any] = {
            "kind": self.kind,
            "overall_confidence": round(self.overall_confidence, 4),
        }
        for name, value in self.field_values().items():
            if value is None:
                out[name] = None
                continue
            out[name] = {
                "value": masked.get(name, value.value),
                "confidence": value.confidence,
            }
        return out


@dataclass(frozen=True)
class AadhaarDocument(_FieldDocument):
    """Fields of an Indian Aadhaar card."""

    kind: ClassVar[str] = "aadhaar"

    aadhaar_number: FieldValue
    name: FieldValue
    date_of_birth: FieldValue
    gender: FieldValue | None = None
    address: FieldValue | None = None
    father_name: FieldValue | None = None
    phone_number: FieldValue | None = None
    email: FieldValue | None = None
    is_back_side: bool = False

    @property
    def masked_aadhaar_number(self) -> str:
        return mask_aadhaar_number(self.aadhaar_number.value)

    def _masked_values(self) -> dict[str, str]:
        return {"aadhaar_number": self.masked_aadhaar_number}

    def to_summary(self, max_fields: int = 3) -> dict[str, str]:
        return {
            "aadhaar_number": self.masked_aadhaar_number,
            "name": self.name.value,
            "date_of_birth": self.date_of_birth.value,
        }

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        out = super().to_dict(mask_sensitive)
        out["is_back_side"] = self.is_back_side
        return out


@dataclass(frozen=True)
class PanDocument(_FieldDocument):
    """Fields of an Indian PAN card."""

    kind: ClassVar[str] = "pan"

    pan_number: FieldValue
    name: FieldValue
    father_name: FieldValue
    date_of_birth: FieldValue
    signature: FieldValue | None = None
    photo: FieldValue | None = None

    @property
    def masked_pan_number(self) -> str:
        return mask_pan_number(self.pan_number.value)

    @property
    def pan_category(self) -> str:
        """Holder category encoded in the fourth character of the PAN."""
        pan = self.pan_number.value.upper()
        if len(pan) < 4:
            return "Other"
        return PAN_CATEGORIES.get(pan[3], "Other")

    def _masked_values(self) -> dict[str, str]:
        return {"pan_number": self.masked_pan_number}

    def to_summary(self, max_fields: int = 3) -> dict[str, str]:
        return {
            "pan_number": self.masked_pan_number,
            "name": self.name.value,
            "date_of_birth": self.date_of_birth.value,
        }

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        out = super().to_dict(mask_sensitive)
        out["pan_category"] = self.pan_category
        return out


@dataclass(frozen=True)
class CardDocument(_FieldDocument):
    """Fields of a credit or debit card."""

    kind: ClassVar[str] = "card"

    card_number: FieldValue
    expiry_date: FieldValue
    card_holder_name: FieldValue
    card_brand: FieldValue
    card_type: FieldValue | None = None
    issuer_bank: FieldValue | None = None

    @property
    def masked_card_number(self) -> str:
        return mask_card_number(self.card_number.value)

    @property
    def is_expired(self) -> bool:
        """True when a detected expiry date is no longer valid."""
        if not self.expiry_date.is_present:
            return False
        return not is_valid_expiry_date(self.expiry_date.value)

    def _masked_values(self) -> dict[str, str]:
        return {"card_number": self.masked_card_number}

    def to_summary(self, max_fields: int = 3) -> dict[str, str]:
        return {
            "card_number": self.masked_card_number,
            "expiry_date": self.expiry_date.value,
            "card_holder_name": self.card_holder_name.value,
        }

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        out = super().to_dict(mask_sensitive)
        out["is_expired"] = self.is_expired
        return out


@dataclass(frozen=True)
class PassportDocument(_FieldDocument):
    """Fields of a passport, usually read from its machine-readable zone."""

    kind: ClassVar[str] = "passport"

    passport_number: FieldValue
    surname: FieldValue
    given_names: FieldValue
    nationality: FieldValue
    date_of_birth: FieldValue
    place_of_birth: FieldValue
    gender: FieldValue
    date_of_issue: FieldValue
    date_of_expiry: FieldValue
    issuing_authority: FieldValue
    personal_number: FieldValue | None = None
    mrz_lines: tuple[str, ...] | None = None

    @property
    def full_name(self) -> str:
        return f"{self.given_names.value} {self.surname.value}".strip()

    @property
    def country_name(self) -> str:
        code = self.nationality.value.upper()
        return COUNTRY_NAMES.get(code, self.nationality.value)

    def to_summary(self, max_fields: int = 3) -> dict[str, str]:
        return {
            "passport_number": self.passport_number.value,
            "name": self.full_name,
            "date_of_expiry": self.date_of_expiry.value,
        }

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        out = super().to_dict(mask_sensitive)
        out["full_name"] = self.full_name
        out["country_name"] = self.country_name
        out["mrz_lines"] = None if mask_sensitive else self.mrz_lines
        return out


@dataclass(frozen=True)
class GenericDocument:
    """Loosely structured record for documents without a dedicated layout."""

    kind: ClassVar[str] = "generic"
    contains_sensitive_data: ClassVar[bool] = True

    raw_text: str
    fragments: tuple[TextFragment, ...]
    detected_fields: dict[str, DetectedField] = field(default_factory=dict)
    document_hints: tuple[str, ...] = ()
    extraction_confidence: float = 0.0
    suggested_document_type: DocumentType | None = None

    @property
    def overall_confidence(self) -> float:
        return self.extraction_confidence

    def to_summary(self, max_fields: int = 3) -> dict[str, str]:
        """Return the most confident detected fields, or a raw text excerpt."""
        ranked = sorted(
            self.detected_fields.items(),
            key=lambda item: item[1].confidence,
            reverse=True,
        )
        summary = {name: f.value for name, f in ranked[:max_fields]}

        if not summary and self.raw_text:
            raw = self.raw_text
            if len(raw) > RAW_TEXT_SUMMARY_LIMIT:
                raw = raw[:RAW_TEXT_SUMMARY_LIMIT] + "..."
            summary["raw_text"] = raw
        return summary

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "overall_confidence": round(self.overall_confidence, 4),
            "suggested_document_type": (
                self.suggested_document_type.value
                if self.suggested_document_type
                else None
            ),
            "document_hints": list(self.document_hints),
            "detected_fields": {
                name: {
                    "value": f.value,
                    "confidence": f.confidence,
                    "kind": f.kind.value,
                }
                for name, f in self.detected_fields.items()
            },
            "raw_text": self.raw_text,
        }


Document = Union[
    AadhaarDocument, PanDocument, CardDocument, PassportDocument, GenericDocument
]
