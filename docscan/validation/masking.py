"""Fixed-shape redaction of identifier numbers for display and logging.

All functions are pure string transforms. Input of the wrong length is
replaced by placeholder characters of matching length rather than
partially revealed.
"""

import re

_SEPARATORS_RE = re.compile(r"[\s-]")
_WHITESPACE_RE = re.compile(r"\s")
_DIGIT_RUN_RE = re.compile(r"\d(?:[\s-]?\d){7,}")


def mask_card_number(card_number: str) -> str:
    """Mask a payment card number, keeping the first and last four digits.

    Example: ``"4111111111111111"`` -> ``"4111 ******** 1111"``.
    """
    cleaned = _SEPARATORS_RE.sub("", card_number)
    if not cleaned:
        return ""
    if len(cleaned) < 8:
        return "*" * len(cleaned)

    middle = "*" * (len(cleaned) - 8)
    return " ".join(part for part in (cleaned[:4], middle, cleaned[-4:]) if part)


def mask_aadhaar_number(aadhaar: str) -> str:
    """Mask an Aadhaar number as ``XXXX-XXXX-<last4>``."""
    cleaned = _SEPARATORS_RE.sub("", aadhaar)
    if len(cleaned) != 12:
        return "X" * len(cleaned)
    return f"XXXX-XXXX-{cleaned[8:]}"


def mask_pan_number(pan: str) -> str:
    """Mask a PAN as ``XXXXX<digits>X``, keeping the four digits."""
    cleaned = _WHITESPACE_RE.sub("", pan).upper()
    if len(cleaned) != 10:
        return "X" * len(cleaned)
    return f"XXXXX{cleaned[5:9]}X"


def _mask_run(match: re.Match[str]) -> str:
    run = match.group(0)
    total_digits = sum(c.isdigit() for c in run)
    seen = 0
    out = []
    for char in run:
        if char.isdigit():
            seen += 1
            out.append(char if seen > total_digits - 4 else "*")
        else:
            out.append(char)
    return "".join(out)


def mask_digits(text: str) -> str:
    """Redact every run of eight or more digits in free text.

    Separators inside the run are preserved and only the last four
    digits stay readable, e.g. ``"2341 2341 2346"`` -> ``"**** **** 2346"``.
    """
    return _DIGIT_RUN_RE.sub(_mask_run, text)
