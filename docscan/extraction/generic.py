"""Heuristic field detection for documents without a dedicated extractor.

Collects every name, date and address candidate, then scans the text for
contact details, links, percentages and currency amounts.
"""

import re

from docscan.extraction.base import field_from_candidate, field_from_match
from docscan.extraction.candidates import (
    extract_address_candidates,
    extract_date_candidates,
    extract_name_candidates,
)
from docscan.models.document_type import DocumentType
from docscan.models.documents import DetectedField, DetectedFieldKind, GenericDocument
from docscan.ocr.fragments import TextFragment, mean_confidence
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

PATTERN_FIELD_CONFIDENCE = 0.7

# (field key prefix, kind, pattern)
_PATTERN_FIELDS: list[tuple[str, DetectedFieldKind, re.Pattern[str]]] = [
    (
        "email",
        DetectedFieldKind.EMAIL,
        re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b"),
    ),
    (
        "url",
        DetectedFieldKind.URL,
        re.compile(r"\b(?:https?://|www\.)[^\s,;]+", re.IGNORECASE),
    ),
    (
        "phone",
        DetectedFieldKind.PHONE,
        re.compile(
            r"(?:\+91[\s\-]?)?\b[6-9]\d{9}\b"
            r"|(?:\+1[\s.\-]?)?\(\d{3}\)[\s.\-]?\d{3}[\s.\-]?\d{4}\b"
            r"|\b\d{3}[.\-]\d{3}[.\-]\d{4}\b"
        ),
    ),
    (
        "percentage",
        DetectedFieldKind.PERCENTAGE,
        re.compile(r"\b\d{1,3}(?:\.\d+)?\s?%"),
    ),
    (
        "amount",
        DetectedFieldKind.AMOUNT,
        re.compile(
            r"(?:[$₹€£]|\bRs\.?|\bINR|\bUSD|\bEUR)\s*\d[\d,]*(?:\.\d{2})?",
            re.IGNORECASE,
        ),
    ),
]


def detect_pattern_fields(text: str) -> dict[str, DetectedField]:
    """Find emails, URLs, phone numbers, percentages and currency amounts.

    Args:
        text: Document text.

    Returns:
        Fields keyed ``<kind>_<index>`` in pattern order.
    """
    fields: dict[str, DetectedField] = {}
    for prefix, kind, pattern in _PATTERN_FIELDS:
        for i, match in enumerate(pattern.finditer(text)):
            fields[f"{prefix}_{i}"] = field_from_match(
                match, PATTERN_FIELD_CONFIDENCE, kind
            )
    return fields


def extract_generic(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
    suggested_type: DocumentType | None = None,
) -> GenericDocument:
    """Build a generic record from every heuristic the scanner knows.

    Args:
        fragments: OCR fragments in reading order.
        config: Unused; accepted for a uniform extractor signature.
        suggested_type: Type to report as the likely document type.

    Returns:
        Generic record whose confidence is the mean fragment confidence.
    """
    raw_text = "\n".join(f.text for f in fragments)
    fields: dict[str, DetectedField] = {}

    for i, name in enumerate(extract_name_candidates(fragments)):
        fields[f"name_{i}"] = field_from_candidate(
            name.name, name, DetectedFieldKind.NAME
        )
    for i, found in enumerate(extract_date_candidates(fragments)):
        fields[f"date_{i}"] = field_from_candidate(
            found.date, found, DetectedFieldKind.DATE
        )
    for i, address in enumerate(extract_address_candidates(fragments)):
        fields[f"address_{i}"] = field_from_candidate(
            ", ".join(address.lines), address, DetectedFieldKind.ADDRESS
        )
    fields.update(detect_pattern_fields(raw_text))

    logger.debug("Generic extraction found %d fields", len(fields))
    return GenericDocument(
        raw_text=raw_text,
        fragments=tuple(fragments),
        detected_fields=fields,
        extraction_confidence=mean_confidence(fragments),
        suggested_document_type=suggested_type,
    )
