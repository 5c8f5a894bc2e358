"""Field extraction for credit and debit cards."""

import re

from docscan.extraction.base import (
    find_field,
    first_rule_match,
    passes_custom_validator,
    required,
    rules,
    space_joined,
)
from docscan.extraction.candidates import is_likely_not_name
from docscan.models.document_type import DocumentType
from docscan.models.documents import CardDocument, FieldValue
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger
from docscan.validation.masking import mask_card_number
from docscan.validation.validators import (
    get_card_brand,
    is_valid_card_number,
    strip_separators,
)

logger = get_logger(__name__)

_I = re.IGNORECASE

_CARD_NUMBER_RULES = rules(
    (r"\b\d{4}\s*\d{4}\s*\d{4}\s*\d{4}\b", 0.9),
    (r"\b\d{13,19}\b", 0.9),
    (r"\b\d{4}[\s-]\d{4}[\s-]\d{4}[\s-]\d{3,4}\b", 0.9),
)
_HOLDER_NAME_RULES = rules((r"\b[A-Z][A-Z\s]+[A-Z]\b", 0.8))
_EXPIRY_RULES = rules(
    (r"\b(?:0[1-9]|1[0-2])[/\s](?:\d{4}|\d{2})\b", 0.8),
    (r"VALID\s+THRU\s+(?P<value>\d{2}/\d{2})", 0.8, _I),
    (r"EXP\s*(?P<value>\d{2}/\d{2})", 0.8, _I),
)
_CARD_TYPE_RULES = rules((r"\b(?P<value>credit|debit)\b", 0.8, _I))
_ISSUER_RULES = rules((r"\b(?P<value>[A-Z][A-Za-z]+\s+(?:BANK|Bank))\b", 0.7))
_BRAND_CONFIDENCE = 0.9

_HOLDER_STOPWORDS = ("BANK", "CARD")
# brand and label words printed next to the holder name
_HOLDER_LABEL_RE = re.compile(
    r"\b(?:VISA|MASTERCARD|RUPAY|AMERICAN\s+EXPRESS|AMEX|DISCOVER"
    r"|VALID\s+(?:THRU|FROM)|CREDIT|DEBIT)\b",
    _I,
)


def _is_holder_name(value: str) -> bool:
    return (
        len(value) > 5
        and not any(w in value for w in _HOLDER_STOPWORDS)
        and not is_likely_not_name(value)
    )


def extract_card(
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
    doc_type: DocumentType = DocumentType.CREDIT_CARD,
) -> CardDocument | None:
    """Extract payment card fields.

    The card number confidence is 0.9 when it passes the Luhn check and
    0.7 otherwise. The brand is derived from the number prefix.

    Args:
        fragments: OCR fragments in reading order.
        config: Scanner configuration carrying custom validators.
        doc_type: Card type whose custom validator applies.

    Returns:
        The card record, or ``None`` when no 13-19 digit number is found.
    """
    text = space_joined(fragments)

    hit = first_rule_match(
        _CARD_NUMBER_RULES, text, lambda v: 13 <= len(strip_separators(v)) <= 19
    )
    if hit is None:
        logger.debug("No card number found")
        return None
    card_number = strip_separators(hit[0])
    if not passes_custom_validator(config, doc_type, card_number):
        return None

    number = FieldValue(
        card_number, 0.9 if is_valid_card_number(card_number) else 0.7
    )
    card_type = find_field(_CARD_TYPE_RULES, text)
    if card_type is not None:
        card_type = FieldValue(card_type.value.lower(), card_type.confidence)

    holder = find_field(
        _HOLDER_NAME_RULES, _HOLDER_LABEL_RE.sub("|", text), _is_holder_name
    )

    logger.info("Extracted card %s", mask_card_number(card_number))
    return CardDocument(
        card_number=number,
        expiry_date=required(find_field(_EXPIRY_RULES, text), "Expiry"),
        card_holder_name=required(holder, "Name"),
        card_brand=FieldValue(get_card_brand(card_number), _BRAND_CONFIDENCE),
        card_type=card_type,
        issuer_bank=find_field(_ISSUER_RULES, text),
    )
