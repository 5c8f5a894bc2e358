"""Shared building blocks for the per-type field extractors.

Field extractors work on the joined text of all fragments and try an
ordered list of ``(pattern, confidence)`` rules per field; the first
rule that matches wins. Patterns expose the wanted value through a
``value`` named group, or through the whole match when they have none.
"""

import re
from collections.abc import Callable, Iterable
from typing import Union

from docscan.extraction.candidates import Candidate
from docscan.models.document_type import DocumentType
from docscan.models.documents import (
    AadhaarDocument,
    CardDocument,
    DetectedField,
    DetectedFieldKind,
    FieldValue,
    GenericDocument,
    PanDocument,
    PassportDocument,
)
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

# (compiled pattern, confidence assigned on a match)
FieldRule = tuple[re.Pattern[str], float]

ExtractedDocument = Union[
    AadhaarDocument, PanDocument, CardDocument, PassportDocument, GenericDocument
]
FieldExtractor = Callable[
    [list[TextFragment], ScannerConfig | None], ExtractedDocument | None
]


def rules(*entries: tuple[str, float] | tuple[str, float, int]) -> list[FieldRule]:
    """Compile ``(regex, confidence[, flags])`` tuples into field rules."""
    compiled: list[FieldRule] = []
    for entry in entries:
        pattern, confidence = entry[0], entry[1]
        flags = entry[2] if len(entry) > 2 else 0
        compiled.append((re.compile(pattern, flags), confidence))
    return compiled


def match_value(match: re.Match[str]) -> str:
    """Return the ``value`` group of a match, or the whole match."""
    if "value" in match.re.groupindex and match.group("value") is not None:
        return match.group("value").strip()
    return match.group(0).strip()


def first_rule_match(
    field_rules: list[FieldRule],
    text: str,
    accept: Callable[[str], bool] | None = None,
) -> tuple[str, float, re.Match[str]] | None:
    """Evaluate rules in order and return the first accepted hit.

    Args:
        field_rules: Ordered rules for one field.
        text: Text to search.
        accept: Optional predicate the extracted value must satisfy.
            Every match of a rule is tried before moving to the next rule.

    Returns:
        ``(value, confidence, match)`` for the winning rule, or ``None``.
    """
    for pattern, confidence in field_rules:
        for match in pattern.finditer(text):
            value = match_value(match)
            if accept is None or accept(value):
                return value, confidence, match
    return None


def find_field(
    field_rules: list[FieldRule],
    text: str,
    accept: Callable[[str], bool] | None = None,
) -> FieldValue | None:
    """Run a rule cascade and wrap the hit as a ``FieldValue``."""
    hit = first_rule_match(field_rules, text, accept)
    if hit is None:
        return None
    value, confidence, _ = hit
    return FieldValue(value, confidence)


def required(value: FieldValue | None, label: str) -> FieldValue:
    """Fall back to the not-detected sentinel for a required field."""
    return value if value is not None else FieldValue.missing(label)


def space_joined(fragments: Iterable[TextFragment]) -> str:
    return " ".join(f.text for f in fragments)


def passes_custom_validator(
    config: ScannerConfig | None,
    doc_type: DocumentType,
    identifier: str,
) -> bool:
    """Apply the caller's validator for ``doc_type``, if one is configured."""
    if config is None:
        return True
    validator = config.custom_validators.get(doc_type.value)
    if validator is None:
        return True
    if validator(identifier):
        return True
    logger.info("Custom validator rejected the %s identifier", doc_type.value)
    return False


def field_from_match(
    match: re.Match[str],
    confidence: float,
    kind: DetectedFieldKind,
) -> DetectedField:
    return DetectedField(
        value=match_value(match),
        confidence=confidence,
        kind=kind,
        raw_text=match.group(0),
    )


def field_from_candidate(
    value: str,
    candidate: Candidate,
    kind: DetectedFieldKind,
) -> DetectedField:
    """Turn a candidate into a detected field that keeps its provenance."""
    return DetectedField(
        value=value,
        confidence=candidate.confidence,
        kind=kind,
        box=candidate.box,
        raw_text=candidate.raw_text,
    )
