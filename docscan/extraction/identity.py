"""Field extractors for Indian identity documents.

Aadhaar and PAN cards yield dedicated records. Voter ID and driving
licence cards have less regular layouts and yield generic records with
the fields that could be located. Every extractor returns ``None`` when
the document's identifying number is missing or rejected by a custom
validator.
"""

import re

from docscan.extraction.base import (
    FieldRule,
    field_from_match,
    find_field,
    first_rule_match,
    passes_custom_validator,
    required,
    rules,
    space_joined,
)
from docscan.models.document_type import DocumentType
from docscan.models.documents import (
    AadhaarDocument,
    DetectedField,
    DetectedFieldKind,
    FieldValue,
    GenericDocument,
    PanDocument,
)
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger
from docscan.validation.masking import mask_aadhaar_number, mask_pan_number
from docscan.validation.validators import is_valid_pan, strip_separators

logger = get_logger(__name__)

_I = re.IGNORECASE

# Aadhaar
_AADHAAR_NUMBER_RULES = rules(
    (r"\b\d{4}\s*\d{4}\s*\d{4}\b", 0.9),
    (r"\b\d{12}\b", 0.9),
    (r"\b\d{4}[\s-]\d{4}[\s-]\d{4}\b", 0.9),
)
_AADHAAR_LONG_RUN_RULES = rules((r"\b\d{4}\s*\d{4}\s*\d{4}\s*\d{1,4}\b", 0.7))
_AADHAAR_NAME_RULES = rules(
    (r"Aadhaar\s+(?P<value>[A-Za-z\s]+?)\s+(?:Male|Female)", 0.9, _I),
    (r"\b(?P<value>[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b", 0.7),
)
_GENDER_RULES = rules((r"\b(?P<value>Male|Female)\b", 0.8, _I))
_AADHAAR_ADDRESS_RULES = rules(
    (r"(?:Male|Female)\s+(?P<value>[^0-9]+?)\s+\d{4}", 0.7, _I),
)
_AADHAAR_RELATION_RULES = rules(
    (
        r"\b(?:S/O|D/O|W/O|C/O)[:\s]*(?P<value>[A-Za-z][A-Za-z\s]+?)(?=,|\s+\d|$)",
        0.8,
        _I,
    ),
)
_DMY_DATE_RULES = rules((r"\b\d{1,2}[/-]\d{1,2}[/-]\d{4}\b", 0.8))
_MOBILE_RULES = rules((r"\b[6-9]\d{9}\b", 0.8))
_EMAIL_RULES = rules((r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b", 0.8))

# PAN
_PAN_NUMBER_RULES = rules(
    (r"\b[A-Z]{5}[0-9]{4}[A-Z]\b", 0.9),
    (r"\b[A-Z0-9]{10}\b", 0.7),
    (r"\b[A-Z]{3,7}[0-9]{2,6}[A-Z0-9]{1,3}\b", 0.7),
)
_PAN_NAME_RULES = rules(
    (
        r"Name\s+(?P<value>[A-Z\s]+?)(?:\s+Father|\s+Date|\s+Permanent|\s+\d)",
        0.9,
        _I,
    ),
    (r"\b(?P<value>[A-Z][A-Z\s]+[A-Z])\b", 0.7),
)
_PAN_FATHER_RULES = rules(
    (
        r"Father.?s?\s+Name\s+(?P<value>[A-Z\s]+?)(?:\s+Date|\s+Permanent|\s+\d)",
        0.9,
        _I,
    ),
)
_PAN_DOB_RULES = rules(
    (r"\b\d{4}-\d{2}-\d{2}\b", 0.8),
    (r"\b\d{1,2}[/-]\d{1,2}[/-]\d{4}\b", 0.8),
    (r"Date\s+of\s+Birth.*?(?P<value>\d{4}-\d{2}-\d{2})", 0.8, _I),
)

# Voter ID (EPIC)
_EPIC_RULES = rules(
    (r"\b[A-Z]{3}[0-9]{7}\b", 0.9),
    (r"\b[A-Z]{2}[0-9]{8}\b", 0.9),
    (r"EPIC[:\s]*(?P<value>[A-Z0-9]{10})", 0.9, _I),
)
_VOTER_NAME_RULES = rules(
    (
        r"Name\s*:\s*(?P<value>[A-Z\s]+?)(?:\s+[A-Z]{3}[0-9]|\s+EPIC|\s+Father)",
        0.9,
        _I,
    ),
)
_VOTER_FATHER_RULES = rules(
    (
        r"Father.?s?\s+Name\s*:\s*(?P<value>[A-Z\s]+?)"
        r"(?:\s+[A-Z]{3}[0-9]|\s+EPIC|\s+Age)",
        0.9,
        _I,
    ),
)
_VOTER_AGE_RULES = rules((r"Age\s*:\s*(?P<value>\d{1,3})", 0.8, _I))

# Driving licence
_LICENSE_NUMBER_RULES = rules(
    (r"\b[A-Z]{2}[0-9]{13}\b", 0.9),
    (r"DL\s*NO[:\s]*(?P<value>[A-Z0-9]{15})", 0.9, _I),
)
_LICENSE_NAME_RULES = rules(
    (
        r"Name\s*(?P<value>[A-Z\s]+?)(?:\s+Date|\s+Son|\s+Daughter|\s+[A-Z]{2}[0-9])",
        0.9,
        _I,
    ),
)
_LICENSE_DOB_RULES = rules(
    (r"Date\s+of\s+Birth\s+(?P<value>\d{1,2}/\d{1,2}/\d{4})", 0.9, _I),
)
_LICENSE_ISSUE_RULES = rules(
    (r"Date\s+of\s+issue\s+(?P<value>\d{1,2}/\d{1,2}/\d{4})", 0.9, _I),
)
_LICENSE_RELATION_RULES = rules(
    (
        r"Son/Daughter/Wife\s+of\s+(?P<value>[A-Z\s]+?)"
        r"(?:\s+Blood|\s+[A-Z]{2}[0-9]|\s+Date)",
        0.9,
        _I,
    ),
)
_BLOOD_GROUP_RULES = rules((r"Blood\s+Group\s+(?P<value>[A-Z]{1,2}[+-]?)", 0.9, _I))
_SLASH_DATE_RE = re.compile(r"\d{1,2}/\d{1,2}/\d{4}(?=\s|$)")
_VALIDITY_CONFIDENCE = 0.8

_AADHAAR_NAME_STOPWORDS_RE = re.compile(r"\b(?:GOVERNMENT|INDIA)\b", _I)
_PAN_NAME_STOPWORDS = ("INCOME", "DEPARTMENT")


def _is_pan_holder_name(value: str) -> bool:
    upper = value.upper()
    return len(value) > 5 and not any(w in upper for w in _PAN_NAME_STOPWORDS)


def _find_aadhaar_number(text: str) -> FieldValue | None:
    hit = first_rule_match(
        _AADHAAR_NUMBER_RULES, text, lambda v: len(strip_separators(v)) == 12
    )
    if hit is not None:
        value, confidence, _ = hit
        return FieldValue(strip_separators(value), confidence)

    # OCR sometimes merges a neighbouring digit group; keep the last 12 digits
    hit = first_rule_match(
        _AADHAAR_LONG_RUN_RULES, text, lambda v: len(strip_separators(v)) > 12
    )
    if hit is not None:
        value, confidence, _ = hit
        return FieldValue(strip_separators(value)[-12:], confidence)
    return None


def extract_aadhaar(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> AadhaarDocument | None:
    """Extract Aadhaar card fields.

    Args:
        fragments: OCR fragments in reading order.
        config: Scanner configuration carrying custom validators.

    Returns:
        The Aadhaar record, or ``None`` when no usable number is found.
    """
    text = space_joined(fragments)

    number = _find_aadhaar_number(text)
    if number is None:
        logger.debug("No Aadhaar number found")
        return None
    if not passes_custom_validator(config, DocumentType.AADHAAR, number.value):
        return None

    name = find_field(
        _AADHAAR_NAME_RULES,
        text,
        lambda v: _AADHAAR_NAME_STOPWORDS_RE.search(v) is None,
    )
    address = find_field(_AADHAAR_ADDRESS_RULES, text)

    logger.info("Extracted Aadhaar %s", mask_aadhaar_number(number.value))
    return AadhaarDocument(
        aadhaar_number=number,
        name=required(name, "Name"),
        date_of_birth=required(find_field(_DMY_DATE_RULES, text), "DOB"),
        gender=find_field(_GENDER_RULES, text),
        address=address,
        father_name=find_field(_AADHAAR_RELATION_RULES, text),
        phone_number=find_field(_MOBILE_RULES, text),
        email=find_field(_EMAIL_RULES, text),
        is_back_side=address is not None and name is None,
    )


def extract_pan(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> PanDocument | None:
    """Extract PAN card fields.

    The number confidence is 0.9 when it has the exact PAN layout and
    0.7 for the looser fallback layouts.

    Args:
        fragments: OCR fragments in reading order.
        config: Scanner configuration carrying custom validators.

    Returns:
        The PAN record, or ``None`` when no 10-character number is found.
    """
    text = space_joined(fragments)

    hit = first_rule_match(_PAN_NUMBER_RULES, text, lambda v: len(v) == 10)
    if hit is None:
        logger.debug("No PAN found")
        return None
    pan, _, _ = hit
    number = FieldValue(pan, 0.9 if is_valid_pan(pan) else 0.7)
    if not passes_custom_validator(config, DocumentType.PAN, pan):
        return None

    name = find_field(_PAN_NAME_RULES, text, _is_pan_holder_name)

    logger.info("Extracted PAN %s", mask_pan_number(pan))
    return PanDocument(
        pan_number=number,
        name=required(name, "Name"),
        father_name=required(find_field(_PAN_FATHER_RULES, text), "Father name"),
        date_of_birth=required(find_field(_PAN_DOB_RULES, text), "DOB"),
    )


def _collect(
    text: str,
    specs: list[tuple[str, list[FieldRule], DetectedFieldKind]],
) -> dict[str, DetectedField]:
    fields: dict[str, DetectedField] = {}
    for name, field_rules, kind in specs:
        hit = first_rule_match(field_rules, text)
        if hit is not None:
            _, confidence, match = hit
            fields[name] = field_from_match(match, confidence, kind)
    return fields


def extract_voter_id(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument | None:
    """Extract voter ID (EPIC) card fields into a generic record."""
    text = space_joined(fragments)

    hit = first_rule_match(_EPIC_RULES, text)
    if hit is None:
        logger.debug("No EPIC number found")
        return None
    epic, confidence, match = hit
    if not passes_custom_validator(config, DocumentType.VOTER_ID, epic):
        return None

    fields = {
        "voter_id_number": field_from_match(match, confidence, DetectedFieldKind.NUMBER)
    }
    fields.update(
        _collect(
            text,
            [
                ("name", _VOTER_NAME_RULES, DetectedFieldKind.NAME),
                ("father_name", _VOTER_FATHER_RULES, DetectedFieldKind.NAME),
                ("age", _VOTER_AGE_RULES, DetectedFieldKind.NUMBER),
            ],
        )
    )

    return GenericDocument(
        raw_text=text,
        fragments=tuple(fragments),
        detected_fields=fields,
        document_hints=("Voter ID Card", "Election Commission of India"),
        extraction_confidence=0.8,
        suggested_document_type=DocumentType.VOTER_ID,
    )


def extract_driving_license(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> GenericDocument | None:
    """Extract Indian driving licence fields into a generic record.

    The validity date is taken to be the last of at least two
    ``DD/MM/YYYY`` dates on the card.
    """
    text = space_joined(fragments)

    hit = first_rule_match(_LICENSE_NUMBER_RULES, text)
    if hit is None:
        logger.debug("No driving licence number found")
        return None
    license_number, confidence, match = hit
    if not passes_custom_validator(
        config, DocumentType.DRIVING_LICENSE, license_number
    ):
        return None

    fields = {
        "license_number": field_from_match(match, confidence, DetectedFieldKind.NUMBER)
    }
    fields.update(
        _collect(
            text,
            [
                ("name", _LICENSE_NAME_RULES, DetectedFieldKind.NAME),
                ("date_of_birth", _LICENSE_DOB_RULES, DetectedFieldKind.DATE),
                ("date_of_issue", _LICENSE_ISSUE_RULES, DetectedFieldKind.DATE),
            ],
        )
    )

    dates = _SLASH_DATE_RE.findall(text)
    if len(dates) >= 2:
        fields["validity"] = DetectedField(
            value=dates[-1],
            confidence=_VALIDITY_CONFIDENCE,
            kind=DetectedFieldKind.DATE,
            raw_text=dates[-1],
        )

    fields.update(
        _collect(
            text,
            [
                (
                    "father_husband_name",
                    _LICENSE_RELATION_RULES,
                    DetectedFieldKind.NAME,
                ),
                ("blood_group", _BLOOD_GROUP_RULES, DetectedFieldKind.OTHER),
            ],
        )
    )

    return GenericDocument(
        raw_text=text,
        fragments=tuple(fragments),
        detected_fields=fields,
        document_hints=("Driving License", "Transport Department"),
        extraction_confidence=0.8,
        suggested_document_type=DocumentType.DRIVING_LICENSE,
    )
