"""Candidate value extraction from positioned OCR fragments.

Scans each fragment's normalized text with permissive regular
expressions and emits typed, unvalidated candidates (identifier
numbers, expiry dates, names, dates, and address groups) that keep the
source fragment's box and confidence. Validation is left to callers.
"""

import re
from dataclasses import dataclass

from docscan.ocr.fragments import BoundingBox, TextFragment
from docscan.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Candidate:
    """Base for a value found in OCR text, with its provenance."""

    confidence: float
    box: BoundingBox
    raw_text: str


@dataclass(frozen=True)
class AadhaarCandidate(Candidate):
    number: str = ""


@dataclass(frozen=True)
class PanCandidate(Candidate):
    number: str = ""


@dataclass(frozen=True)
class CardCandidate(Candidate):
    number: str = ""


@dataclass(frozen=True)
class ExpiryCandidate(Candidate):
    month: str = ""
    year: str = ""


@dataclass(frozen=True)
class NameCandidate(Candidate):
    name: str = ""


@dataclass(frozen=True)
class DateCandidate(Candidate):
    date: str = ""


@dataclass(frozen=True)
class AddressCandidate(Candidate):
    lines: tuple[str, ...] = ()


_AADHAAR_RE = re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}\b")
_PAN_RE = re.compile(r"\b[A-Z]{5}[0-9]{4}[A-Z]\b")
_CARD_RE = re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{1,7}\b")
_EXPIRY_RE = re.compile(r"\b(0[1-9]|1[0-2])[/\s-]?(\d{2}|\d{4})\b")
_NAME_RE = re.compile(
    r"\b[A-Za-z]{2,}\s+[A-Za-z]{2,}(?:\s+[A-Za-z]{2,})?(?:\s+[A-Za-z]{2,})?\b"
)
_SEPARATORS_RE = re.compile(r"[\s-]")
_NUMERIC_RE = re.compile(r"\d+")
_POSTAL_CODE_RE = re.compile(r"\b\d{6}\b")

# Day-first, year-first, then month-first; overlapping matches are kept.
_DATE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\b(0[1-9]|[12][0-9]|3[01])[/\-.](0[1-9]|1[0-2])[/\-.](\d{4})\b"),
    re.compile(r"\b(\d{4})[/\-.](0[1-9]|1[0-2])[/\-.](0[1-9]|[12][0-9]|3[01])\b"),
    re.compile(r"\b(0[1-9]|1[0-2])[/\-.](0[1-9]|[12][0-9]|3[01])[/\-.](\d{4})\b"),
]

NON_NAME_MARKERS: tuple[str, ...] = (
    "GOVERNMENT OF",
    "INCOME TAX",
    "PERMANENT ACCOUNT",
    "UNIQUE IDENTIFICATION",
    "VALID THRU",
    "EXPIRES",
    "SIGNATURE",
    "ADDRESS",
    "DATE OF BIRTH",
    "FATHER",
    "MOTHER",
    "SPOUSE",
)

ADDRESS_INDICATORS: tuple[str, ...] = (
    "STREET",
    "ROAD",
    "AVENUE",
    "LANE",
    "COLONY",
    "NAGAR",
    "CITY",
    "DISTRICT",
    "STATE",
    "PIN",
    "PINCODE",
    "POSTAL",
    "APARTMENT",
    "FLAT",
    "HOUSE",
    "BUILDING",
    "BLOCK",
    "SECTOR",
    "PHASE",
)

ADDRESS_GROUP_DISTANCE = 50.0


def extract_aadhaar_candidates(fragments: list[TextFragment]) -> list[AadhaarCandidate]:
    """Find 12-digit groups that could be Aadhaar numbers.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Candidates with separators stripped, in fragment order.
    """
    candidates: list[AadhaarCandidate] = []
    for fragment in fragments:
        for match in _AADHAAR_RE.finditer(fragment.normalized_text):
            raw = match.group(0)
            number = _SEPARATORS_RE.sub("", raw)
            if len(number) == 12:
                candidates.append(
                    AadhaarCandidate(
                        confidence=fragment.confidence,
                        box=fragment.box,
                        raw_text=raw,
                        number=number,
                    )
                )
    return candidates


def extract_pan_candidates(fragments: list[TextFragment]) -> list[PanCandidate]:
    """Find ``AAAAA9999A`` sequences, case-insensitively.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Uppercased PAN candidates.
    """
    candidates: list[PanCandidate] = []
    for fragment in fragments:
        for match in _PAN_RE.finditer(fragment.normalized_text.upper()):
            number = match.group(0)
            candidates.append(
                PanCandidate(
                    confidence=fragment.confidence,
                    box=fragment.box,
                    raw_text=number,
                    number=number,
                )
            )
    return candidates


def extract_card_candidates(fragments: list[TextFragment]) -> list[CardCandidate]:
    """Find 13-19 digit groups that could be payment card numbers.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Candidates with separators stripped.
    """
    candidates: list[CardCandidate] = []
    for fragment in fragments:
        for match in _CARD_RE.finditer(fragment.normalized_text):
            raw = match.group(0)
            number = _SEPARATORS_RE.sub("", raw)
            if 13 <= len(number) <= 19:
                candidates.append(
                    CardCandidate(
                        confidence=fragment.confidence,
                        box=fragment.box,
                        raw_text=raw,
                        number=number,
                    )
                )
    return candidates


def extract_expiry_candidates(fragments: list[TextFragment]) -> list[ExpiryCandidate]:
    """Find ``MM/YY`` and ``MM/YYYY`` card expiry dates.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Expiry candidates with month and year split out.
    """
    candidates: list[ExpiryCandidate] = []
    for fragment in fragments:
        for match in _EXPIRY_RE.finditer(fragment.normalized_text):
            candidates.append(
                ExpiryCandidate(
                    confidence=fragment.confidence,
                    box=fragment.box,
                    raw_text=match.group(0),
                    month=match.group(1),
                    year=match.group(2),
                )
            )
    return candidates


def is_likely_not_name(text: str) -> bool:
    """Return True if the text contains document boilerplate."""
    upper = text.upper()
    return any(marker in upper for marker in NON_NAME_MARKERS)


def extract_name_candidates(fragments: list[TextFragment]) -> list[NameCandidate]:
    """Find runs of two to four alphabetic words that could be names.

    Purely numeric and single-character fragments are skipped, and any
    match containing header boilerplate such as ``GOVERNMENT OF`` is
    discarded.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Name candidates in fragment order.
    """
    candidates: list[NameCandidate] = []
    for fragment in fragments:
        text = fragment.normalized_text
        if _NUMERIC_RE.fullmatch(text) or len(text) < 2:
            continue

        for match in _NAME_RE.finditer(text):
            name = match.group(0)
            if is_likely_not_name(name):
                continue
            candidates.append(
                NameCandidate(
                    confidence=fragment.confidence,
                    box=fragment.box,
                    raw_text=name,
                    name=name,
                )
            )
    return candidates


def extract_date_candidates(fragments: list[TextFragment]) -> list[DateCandidate]:
    """Find dates in day-first, year-first and month-first layouts.

    Every pattern runs over every fragment, so an ambiguous date such as
    ``05/06/2020`` is reported once per layout it fits.

    Args:
        fragments: OCR fragments to scan.

    Returns:
        Date candidates grouped by fragment, then by pattern order.
    """
    candidates: list[DateCandidate] = []
    for fragment in fragments:
        text = fragment.normalized_text
        for pattern in _DATE_PATTERNS:
            for match in pattern.finditer(text):
                value = match.group(0)
                candidates.append(
                    DateCandidate(
                        confidence=fragment.confidence,
                        box=fragment.box,
                        raw_text=value,
                        date=value,
                    )
                )
    return candidates


def is_likely_address_text(text: str) -> bool:
    """Return True if the text looks like a line of a postal address."""
    upper = text.upper()
    if any(indicator in upper for indicator in ADDRESS_INDICATORS):
        return True
    if _POSTAL_CODE_RE.search(text):
        return True
    return len(text.split(" ")) >= 3


def are_fragments_nearby(
    first: TextFragment,
    second: TextFragment,
    max_distance: float = ADDRESS_GROUP_DISTANCE,
) -> bool:
    """Return True if the fragment centers are at most ``max_distance`` apart."""
    c1 = first.box.center
    c2 = second.box.center
    squared = (c1.x - c2.x) ** 2 + (c1.y - c2.y) ** 2
    return squared <= max_distance * max_distance


def extract_address_candidates(
    fragments: list[TextFragment],
    max_distance: float = ADDRESS_GROUP_DISTANCE,
) -> list[AddressCandidate]:
    """Group nearby address-like fragments into multi-line addresses.

    Fragments are grouped greedily in reading order: an address-like
    fragment joins the most recently started group when it is close to
    that group's last member, otherwise it starts a new group. Only
    groups of at least two lines become candidates.

    Args:
        fragments: OCR fragments to scan.
        max_distance: Maximum center-to-center distance within a group.

    Returns:
        Address candidates with union boxes and mean confidences.
    """
    groups: list[list[TextFragment]] = []

    for fragment in fragments:
        text = fragment.normalized_text
        if len(text) < 5 or _NUMERIC_RE.fullmatch(text):
            continue
        if not is_likely_address_text(text):
            continue

        if groups and are_fragments_nearby(groups[-1][-1], fragment, max_distance):
            groups[-1].append(fragment)
        else:
            groups.append([fragment])

    candidates: list[AddressCandidate] = []
    for group in groups:
        if len(group) < 2:
            continue
        lines = tuple(f.text for f in group)
        candidates.append(
            AddressCandidate(
                confidence=sum(f.confidence for f in group) / len(group),
                box=BoundingBox.union(f.box for f in group),
                raw_text="\n".join(lines),
                lines=lines,
            )
        )

    logger.debug(
        "Address grouping formed %d groups, %d candidates",
        len(groups),
        len(candidates),
    )
    return candidates
