"""Field extraction for invoices, receipts and healthcare documents.

These documents have no fixed layout, so each extractor looks for a
handful of labelled values and returns a generic record with whatever
it found. They always return a record.
"""

import re

from docscan.extraction.base import (
    FieldRule,
    field_from_candidate,
    field_from_match,
    first_rule_match,
    passes_custom_validator,
    rules,
    space_joined,
)
from docscan.extraction.candidates import (
    extract_date_candidates,
    extract_name_candidates,
)
from docscan.models.document_type import DocumentType
from docscan.models.documents import DetectedField, DetectedFieldKind, GenericDocument
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

_I = re.IGNORECASE
_CURRENCY = r"(?:Rs\.?|₹|INR|\$)?"

_INVOICE_NUMBER_RULES = rules(
    (r"Invoice\s*(?:No|Number|#)[:\s]*(?P<value>[A-Z0-9-]+)", 0.9, _I),
)
_INVOICE_TOTAL_RULES = rules(
    (rf"Total[:\s]*{_CURRENCY}\s*(?P<value>[\d,]+\.?\d*)", 0.9, _I),
    (rf"Amount[:\s]*{_CURRENCY}\s*(?P<value>[\d,]+\.?\d*)", 0.9, _I),
)
_RECEIPT_NUMBER_RULES = rules(
    (
        r"(?:Receipt|Transaction|Ref)\s*(?:No|Number|#|ID)[:\s]*(?P<value>[A-Z0-9-]+)",
        0.9,
        _I,
    ),
)
_RECEIPT_AMOUNT_RULES = rules(
    (rf"(?:Total|Amount|Paid)[:\s]*{_CURRENCY}\s*(?P<value>[\d,]+\.?\d*)", 0.9, _I),
)
_POLICY_NUMBER_RULES = rules(
    (r"(?:Policy|Member|ID)\s*(?:No|Number)[:\s]*(?P<value>[A-Z0-9-]+)", 0.9, _I),
)
_PATIENT_NAME_RULES = rules(
    (
        r"(?i:Patient\s*(?:Name)?)[:\s]*(?P<value>[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)",
        0.9,
    ),
)
_REPORT_NUMBER_RULES = rules(
    (r"(?:Report|Lab|Test)\s*(?:No|Number|ID)[:\s]*(?P<value>[A-Z0-9-]+)", 0.9, _I),
)


def _add_rule_field(
    fields: dict[str, DetectedField],
    name: str,
    field_rules: list[FieldRule],
    text: str,
    kind: DetectedFieldKind,
    doc_type: DocumentType | None = None,
    config: ScannerConfig | None = None,
) -> None:
    """Add the first rule hit as a field, subject to a custom validator."""
    hit = first_rule_match(field_rules, text)
    if hit is None:
        return
    value, confidence, match = hit
    if doc_type is not None and not passes_custom_validator(config, doc_type, value):
        return
    fields[name] = field_from_match(match, confidence, kind)


def _add_first_date(
    fields: dict[str, DetectedField],
    name: str,
    fragments: list[TextFragment],
) -> None:
    dates = extract_date_candidates(fragments)
    if dates:
        fields[name] = field_from_candidate(
            dates[0].date, dates[0], DetectedFieldKind.DATE
        )


def _document(
    fragments: list[TextFragment],
    fields: dict[str, DetectedField],
    hints: tuple[str, ...],
    doc_type: DocumentType,
    confidence: float = 0.7,
) -> GenericDocument:
    logger.debug("Extracted %d %s fields", len(fields), doc_type.value)
    return GenericDocument(
        raw_text=space_joined(fragments),
        fragments=tuple(fragments),
        detected_fields=fields,
        document_hints=hints,
        extraction_confidence=confidence if fields else 0.5,
        suggested_document_type=doc_type,
    )


def extract_invoice(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument:
    """Extract invoice number, total amount and date."""
    text = space_joined(fragments)
    fields: dict[str, DetectedField] = {}

    _add_rule_field(
        fields,
        "invoice_number",
        _INVOICE_NUMBER_RULES,
        text,
        DetectedFieldKind.NUMBER,
        DocumentType.INVOICE,
        config,
    )
    _add_rule_field(
        fields, "total_amount", _INVOICE_TOTAL_RULES, text, DetectedFieldKind.AMOUNT
    )
    _add_first_date(fields, "date", fragments)

    return _document(fragments, fields, ("Invoice", "Bill"), DocumentType.INVOICE)


def extract_receipt(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument:
    """Extract receipt or transaction number, amount and date."""
    text = space_joined(fragments)
    fields: dict[str, DetectedField] = {}

    _add_rule_field(
        fields,
        "receipt_number",
        _RECEIPT_NUMBER_RULES,
        text,
        DetectedFieldKind.NUMBER,
        DocumentType.RECEIPT,
        config,
    )
    _add_rule_field(
        fields, "amount", _RECEIPT_AMOUNT_RULES, text, DetectedFieldKind.AMOUNT
    )
    _add_first_date(fields, "date", fragments)

    return _document(
        fragments, fields, ("Receipt", "Payment Confirmation"), DocumentType.RECEIPT
    )


def extract_health_insurance(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument:
    """Extract policy number, member name and validity date."""
    text = space_joined(fragments)
    fields: dict[str, DetectedField] = {}

    _add_rule_field(
        fields,
        "policy_number",
        _POLICY_NUMBER_RULES,
        text,
        DetectedFieldKind.NUMBER,
        DocumentType.HEALTH_INSURANCE,
        config,
    )
    names = extract_name_candidates(fragments)
    if names:
        fields["member_name"] = field_from_candidate(
            names[0].name, names[0], DetectedFieldKind.NAME
        )
    _add_first_date(fields, "validity", fragments)

    return _document(
        fragments,
        fields,
        ("Health Insurance", "Medical Coverage"),
        DocumentType.HEALTH_INSURANCE,
        confidence=0.75,
    )


def extract_lab_report(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument:
    """Extract patient name, report number and report date."""
    text = space_joined(fragments)
    fields: dict[str, DetectedField] = {}

    _add_rule_field(
        fields, "patient_name", _PATIENT_NAME_RULES, text, DetectedFieldKind.NAME
    )
    _add_rule_field(
        fields,
        "report_number",
        _REPORT_NUMBER_RULES,
        text,
        DetectedFieldKind.NUMBER,
        DocumentType.LAB_REPORT,
        config,
    )
    _add_first_date(fields, "report_date", fragments)

    return _document(
        fragments,
        fields,
        ("Lab Report", "Medical Test Results"),
        DocumentType.LAB_REPORT,
    )
