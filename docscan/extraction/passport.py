"""Passport extraction from the TD3 machine-readable zone.

A TD3 passport MRZ is two 44-character lines::

    P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<
    L898902C36UTO7408122F1204159ZE184226B<<<<<10

When both lines are recognized the fields are parsed from fixed columns
and scored by their ICAO 9303 check digits. Without an MRZ the visual
zone is searched for a passport number, a name and dates instead.
"""

import re
from datetime import date

from docscan.extraction.base import (
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
from docscan.models.documents import (
    DetectedField,
    DetectedFieldKind,
    FieldValue,
    GenericDocument,
    PassportDocument,
)
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger
from docscan.validation.validators import is_mrz_line, is_valid_mrz_field

logger = get_logger(__name__)

TD3_LINE_LENGTH = 44

CHECKED_CONFIDENCE = 0.9
UNCHECKED_CONFIDENCE = 0.7

_PASSPORT_NUMBER_RULES = rules(
    (r"\bPassport\s*(?:No|Number)[:\s]*(?P<value>[A-Z0-9]{6,9})\b", 0.9, re.I),
    (r"\b[A-Z][0-9]{7,8}\b", 0.9),
)
_PLACE_OF_BIRTH_RE = re.compile(r"^Place\s+of\s+Birth[:\s]+(?P<value>.+)$", re.I)
_DATE_OF_ISSUE_RE = re.compile(r"^Date\s+of\s+Issue[:\s]+(?P<value>.+)$", re.I)
_VISUAL_ZONE_CONFIDENCE = 0.8

_DATE_LABELS = ("date_of_birth", "date_of_issue", "date_of_expiry")


def find_td3_lines(fragments: list[TextFragment]) -> tuple[str, str] | None:
    """Locate two consecutive TD3 MRZ lines, the first starting with ``P``."""
    lines = [f.normalized_text.replace(" ", "") for f in fragments]
    for first, second in zip(lines, lines[1:]):
        if (
            len(first) == TD3_LINE_LENGTH
            and len(second) == TD3_LINE_LENGTH
            and first.startswith("P")
            and is_mrz_line(first)
            and is_mrz_line(second)
        ):
            return first, second
    return None


def _mrz_text(value: str) -> str:
    return " ".join(value.replace("<", " ").split())


def _mrz_date(value: str, future: bool) -> str:
    """Render a ``YYMMDD`` MRZ date as ``YYYY-MM-DD``.

    Expiry dates are always in this century; birth dates are placed in
    the last century when they would otherwise lie in the future.
    """
    if not value.isdigit():
        return value
    year = 2000 + int(value[:2])
    if not future and year > date.today().year:
        year -= 100
    return f"{year}-{value[2:4]}-{value[4:6]}"


def _checked(value: str, field_value: str, check: str) -> FieldValue:
    valid = is_valid_mrz_field(field_value, check)
    return FieldValue(value, CHECKED_CONFIDENCE if valid else UNCHECKED_CONFIDENCE)


def _visual_zone_field(
    fragments: list[TextFragment], pattern: re.Pattern[str], label: str
) -> FieldValue:
    for fragment in fragments:
        match = pattern.match(fragment.normalized_text)
        if match:
            return FieldValue(match.group("value").strip(), _VISUAL_ZONE_CONFIDENCE)
    return FieldValue.missing(label)


def parse_td3(
    line1: str,
    line2: str,
    fragments: list[TextFragment] | None = None,
) -> PassportDocument:
    """Parse a TD3 MRZ pair into a passport record.

    Args:
        line1: First MRZ line (document code, issuer and names).
        line2: Second MRZ line (number, nationality, dates, sex).
        fragments: Visual-zone fragments searched for the place of birth
            and date of issue, which the MRZ does not carry.

    Returns:
        Passport record with check-digit-weighted confidences.
    """
    fragments = fragments or []

    surname, _, given = line1[5:].partition("<<")
    number_raw = line2[0:9]
    birth_raw = line2[13:19]
    expiry_raw = line2[21:27]
    personal_raw = line2[28:42]

    personal_number = None
    personal = _mrz_text(personal_raw)
    if personal:
        personal_number = _checked(personal, personal_raw, line2[42])

    return PassportDocument(
        passport_number=_checked(
            number_raw.replace("<", ""), number_raw, line2[9]
        ),
        surname=FieldValue(_mrz_text(surname), CHECKED_CONFIDENCE),
        given_names=FieldValue(_mrz_text(given), CHECKED_CONFIDENCE),
        nationality=FieldValue(line2[10:13].replace("<", ""), CHECKED_CONFIDENCE),
        date_of_birth=_checked(_mrz_date(birth_raw, False), birth_raw, line2[19]),
        place_of_birth=_visual_zone_field(
            fragments, _PLACE_OF_BIRTH_RE, "Place of birth"
        ),
        gender=FieldValue(line2[20].replace("<", "X"), CHECKED_CONFIDENCE),
        date_of_issue=_visual_zone_field(
            fragments, _DATE_OF_ISSUE_RE, "Date of issue"
        ),
        date_of_expiry=_checked(_mrz_date(expiry_raw, True), expiry_raw, line2[27]),
        issuing_authority=FieldValue(line1[2:5].replace("<", ""), CHECKED_CONFIDENCE),
        personal_number=personal_number,
        mrz_lines=(line1, line2),
    )


def _visual_zone_document(
    fragments: list[TextFragment],
    config: ScannerConfig | None,
) -> GenericDocument:
    text = space_joined(fragments)
    fields: dict[str, DetectedField] = {}

    hit = first_rule_match(_PASSPORT_NUMBER_RULES, text)
    if hit is not None:
        value, confidence, match = hit
        if passes_custom_validator(config, DocumentType.PASSPORT, value):
            fields["passport_number"] = field_from_match(
                match, confidence, DetectedFieldKind.NUMBER
            )

    names = extract_name_candidates(fragments)
    if names:
        fields["name"] = field_from_candidate(
            names[0].name, names[0], DetectedFieldKind.NAME
        )

    for label, candidate in zip(_DATE_LABELS, extract_date_candidates(fragments)):
        fields[label] = field_from_candidate(
            candidate.date, candidate, DetectedFieldKind.DATE
        )

    return GenericDocument(
        raw_text=text,
        fragments=tuple(fragments),
        detected_fields=fields,
        document_hints=("Passport", "International Travel Document"),
        extraction_confidence=0.75 if fields else 0.5,
        suggested_document_type=DocumentType.PASSPORT,
    )


def extract_passport(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> PassportDocument | GenericDocument:
    """Extract passport fields, preferring the machine-readable zone.

    An MRZ whose passport number is rejected by a custom validator is
    ignored and the visual zone is used instead.

    Args:
        fragments: OCR fragments in reading order.
        config: Scanner configuration carrying custom validators.

    Returns:
        A passport record when a TD3 MRZ is present, else a generic record.
    """
    mrz = find_td3_lines(fragments)
    if mrz is not None:
        document = parse_td3(*mrz, fragments=fragments)
        number = document.passport_number.value
        if passes_custom_validator(config, DocumentType.PASSPORT, number):
            logger.info(
                "Parsed passport MRZ (issuer %s)", document.issuing_authority.value
            )
            return document

    return _visual_zone_document(fragments, config)
