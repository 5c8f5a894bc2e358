"""Shared test fixtures for the document scanner test suite."""

from collections.abc import Callable
from pathlib import Path

import pytest

from docscan.ocr.fragments import BoundingBox, TextFragment

FragmentFactory = Callable[..., list[TextFragment]]


def make_fragment(
    text: str,
    confidence: float = 0.9,
    x: float = 0.0,
    y: float = 0.0,
    width: float = 100.0,
    height: float = 20.0,
) -> TextFragment:
    """Create a test fragment with defaults."""
    return TextFragment(
        text=text,
        box=BoundingBox(x=x, y=y, width=width, height=height),
        confidence=confidence,
    )


def make_fragments(*texts: str, confidence: float = 0.9) -> list[TextFragment]:
    """Create fragments stacked vertically, 30 units apart."""
    return [
        make_fragment(text, confidence=confidence, y=i * 30.0)
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def fragments() -> FragmentFactory:
    """Factory building vertically stacked fragments from texts."""
    return make_fragments


@pytest.fixture
def aadhaar_fragments() -> list[TextFragment]:
    """Front side of an Aadhaar card with a checksum-valid number."""
    return make_fragments(
        "Government of India",
        "John Doe",
        "2341 2341 2346",
        confidence=0.95,
    )


@pytest.fixture
def pan_fragments() -> list[TextFragment]:
    """A PAN card with holder, father and birth date."""
    return make_fragments(
        "INCOME TAX DEPARTMENT",
        "Permanent Account Number",
        "ABCPE1234F",
        "Name RAHUL SHARMA",
        "Father's Name VIJAY SHARMA",
        "Date of Birth 15/08/1990",
        confidence=0.95,
    )


@pytest.fixture
def card_fragments() -> list[TextFragment]:
    """A Visa card with a Luhn-valid test number."""
    return make_fragments(
        "VISA",
        "4111 1111 1111 1111",
        "VALID THRU 12/99",
        "JANE SMITH",
        confidence=0.95,
    )


@pytest.fixture
def mrz_lines() -> tuple[str, str]:
    """The ICAO 9303 specimen passport MRZ."""
    line1 = "P<UTOERIKSSON<<ANNA<MARIA".ljust(44, "<")
    line2 = "L898902C36UTO7408122F1204159ZE184226B<<<<<10"
    return line1, line2


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
