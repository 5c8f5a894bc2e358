"""Checksum and format validators for identity and payment numbers.

Implements the Luhn and Verhoeff checksums, format checks for Aadhaar,
PAN, card and passport numbers, card expiry checks, card brand
detection, and the ICAO 9303 check digit used in passport MRZ lines.
Every predicate fails closed: malformed input returns ``False`` (or
``"Unknown"``) instead of raising.
"""

import calendar
import re
from datetime import date

_DIGITS_RE = re.compile(r"\d+")
_SEPARATORS_RE = re.compile(r"[\s-]")
_WHITESPACE_RE = re.compile(r"\s")

_PAN_RE = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")
_PASSPORT_RE = re.compile(r"[A-Z0-9]+")
_MRZ_RE = re.compile(r"[A-Z0-9<]+")

# Verhoeff dihedral group D5 multiplication table
_VERHOEFF_D: tuple[tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 2, 3, 4, 0, 6, 7, 8, 9, 5),
    (2, 3, 4, 0, 1, 7, 8, 9, 5, 6),
    (3, 4, 0, 1, 2, 8, 9, 5, 6, 7),
    (4, 0, 1, 2, 3, 9, 5, 6, 7, 8),
    (5, 9, 8, 7, 6, 0, 4, 3, 2, 1),
    (6, 5, 9, 8, 7, 1, 0, 4, 3, 2),
    (7, 6, 5, 9, 8, 2, 1, 0, 4, 3),
    (8, 7, 6, 5, 9, 3, 2, 1, 0, 4),
    (9, 8, 7, 6, 5, 4, 3, 2, 1, 0),
)

# Verhoeff permutation table
_VERHOEFF_P: tuple[tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 5, 7, 6, 2, 8, 3, 0, 9, 4),
    (5, 8, 0, 3, 7, 9, 6, 1, 4, 2),
    (8, 9, 1, 6, 0, 4, 3, 5, 2, 7),
    (9, 4, 5, 3, 1, 2, 6, 8, 7, 0),
    (4, 2, 8, 6, 5, 7, 3, 9, 0, 1),
    (2, 7, 9, 3, 8, 0, 6, 4, 1, 5),
    (7, 0, 4, 6, 9, 1, 3, 2, 5, 8),
)

_MRZ_WEIGHTS = (7, 3, 1)

UNKNOWN_BRAND = "Unknown"


def strip_separators(value: str) -> str:
    """Remove whitespace and hyphens from an identifier string."""
    return _SEPARATORS_RE.sub("", value)


def _is_digits(value: str) -> bool:
    return bool(value) and _DIGITS_RE.fullmatch(value) is not None


def luhn_check(digits: str) -> bool:
    """Validate a digit string with the Luhn (mod 10) checksum.

    Args:
        digits: String of decimal digits, no separators.

    Returns:
        True if the checksum holds, False otherwise or on non-digit input.
    """
    if not _is_digits(digits):
        return False

    total = 0
    for i, char in enumerate(reversed(digits)):
        digit = int(char)
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def verhoeff_check(digits: str) -> bool:
    """Validate a digit string with the Verhoeff checksum.

    Args:
        digits: String of decimal digits, check digit last.

    Returns:
        True if the final accumulator is zero, False otherwise or on
        non-digit input.
    """
    if not _is_digits(digits):
        return False

    checksum = 0
    for i, char in enumerate(reversed(digits)):
        permuted = _VERHOEFF_P[i % 8][int(char)]
        checksum = _VERHOEFF_D[checksum][permuted]
    return checksum == 0


def is_valid_aadhaar(aadhaar: str) -> bool:
    """Check a 12-digit Aadhaar number, including its Verhoeff check digit."""
    cleaned = strip_separators(aadhaar)
    if len(cleaned) != 12 or not _is_digits(cleaned):
        return False
    if cleaned[0] in "01":
        return False
    return verhoeff_check(cleaned)


def is_valid_pan(pan: str) -> bool:
    """Check the ``AAAAA9999A`` PAN layout."""
    cleaned = _WHITESPACE_RE.sub("", pan).upper()
    if len(cleaned) != 10:
        return False
    return _PAN_RE.fullmatch(cleaned) is not None


def is_valid_card_number(card_number: str) -> bool:
    """Check a 13-19 digit payment card number against Luhn."""
    cleaned = strip_separators(card_number)
    if not 13 <= len(cleaned) <= 19 or not _is_digits(cleaned):
        return False
    return luhn_check(cleaned)


def is_valid_passport_number(passport: str) -> bool:
    """Check that a passport number is 6-9 letters and digits."""
    cleaned = _WHITESPACE_RE.sub("", passport).upper()
    if not 6 <= len(cleaned) <= 9:
        return False
    return _PASSPORT_RE.fullmatch(cleaned) is not None


def is_valid_expiry_date(expiry: str, today: date | None = None) -> bool:
    """Check that a card expiry date is well formed and not yet past.

    Accepts ``MMYY`` and ``MMYYYY`` once spaces and slashes are removed.
    A card stays valid through the last day of its expiry month.

    Args:
        expiry: Expiry string such as ``"12/25"`` or ``"01/2030"``.
        today: Reference date, defaults to the current date.

    Returns:
        True if the last day of the expiry month is after ``today``.
    """
    cleaned = re.sub(r"[\s/]", "", expiry)
    if not _is_digits(cleaned):
        return False

    if len(cleaned) == 4:
        month, year = int(cleaned[:2]), 2000 + int(cleaned[2:])
    elif len(cleaned) == 6:
        month, year = int(cleaned[:2]), int(cleaned[2:])
        if not 2000 <= year <= 2099:
            return False
    else:
        return False

    if not 1 <= month <= 12:
        return False

    last_day = date(year, month, calendar.monthrange(year, month)[1])
    return last_day > (today or date.today())


def get_card_brand(card_number: str) -> str:
    """Determine the card network from the number prefix.

    Rules are evaluated in order and the first match wins, since the
    prefix ranges of the networks overlap.

    Args:
        card_number: Card number, separators allowed.

    Returns:
        Brand name, or ``"Unknown"`` when no rule matches.
    """
    cleaned = strip_separators(card_number)
    if len(cleaned) < 4 or not _is_digits(cleaned):
        return UNKNOWN_BRAND

    first2 = cleaned[:2]
    first4 = cleaned[:4]
    first4_num = int(first4)

    if cleaned[0] == "4":
        return "Visa"
    if "51" <= first2 <= "55" or 2221 <= first4_num <= 2720:
        return "Mastercard"
    if first2 in ("34", "37"):
        return "American Express"
    if first2 == "60" or first4 in ("6521", "6522"):
        return "RuPay"
    if (
        first4 == "6011"
        or first2 == "65"
        or 6221 <= first4_num <= 6229
        or "644" <= cleaned[:3] <= "649"
    ):
        return "Discover"
    if first2 == "35":
        return "JCB"
    if first2 in ("30", "36", "38"):
        return "Diners Club"
    return UNKNOWN_BRAND


def is_mrz_line(text: str) -> bool:
    """Heuristic test for a passport machine-readable zone line."""
    cleaned = text.replace(" ", "")
    return (
        len(cleaned) >= 30
        and _MRZ_RE.fullmatch(cleaned) is not None
        and "<" in cleaned
    )


def mrz_check_digit(value: str) -> int | None:
    """Compute the ICAO 9303 check digit for an MRZ field.

    Args:
        value: MRZ field characters (``A-Z``, ``0-9`` and ``<``).

    Returns:
        The check digit, or ``None`` if the field has other characters.
    """
    total = 0
    for i, char in enumerate(value):
        if char.isdigit():
            weight = int(char)
        elif "A" <= char <= "Z":
            weight = ord(char) - ord("A") + 10
        elif char == "<":
            weight = 0
        else:
            return None
        total += weight * _MRZ_WEIGHTS[i % 3]
    return total % 10


def is_valid_mrz_field(value: str, check: str) -> bool:
    """Return True if ``check`` is the MRZ check digit of ``value``."""
    expected = mrz_check_digit(value)
    if expected is None:
        return False
    if check == "<":
        # filler check digit is only allowed on an empty optional field
        return set(value) <= {"<"}
    return check.isdigit() and int(check) == expected
