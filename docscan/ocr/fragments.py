"""Positioned OCR text fragments consumed by the scanning core.

A fragment is one recognized span of text with its image-space bounding
box and recognition confidence, as produced by an OCR collaborator.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Point:
    """A 2D point in image coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box for a detected element."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        """Return True if the point lies inside the box, edges included."""
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )

    def intersects(self, other: "BoundingBox") -> bool:
        """Return True if the boxes overlap; touching edges do not count."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )

    @classmethod
    def union(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        """Calculate the bounding box that encloses all given boxes.

        Args:
            boxes: Non-empty collection of boxes.

        Returns:
            Enclosing bounding box.
        """
        boxes = list(boxes)
        x_min = min(b.x for b in boxes)
        y_min = min(b.y for b in boxes)
        x_max = max(b.x + b.width for b in boxes)
        y_max = max(b.y + b.height for b in boxes)
        return cls(x_min, y_min, x_max - x_min, y_max - y_min)


@dataclass(frozen=True)
class TextFragment:
    """A single OCR fragment with position and confidence."""

    text: str
    box: BoundingBox
    confidence: float
    line: int | None = None
    paragraph: int | None = None
    language: str | None = None

    @property
    def normalized_text(self) -> str:
        """Trimmed text with internal whitespace collapsed to single spaces."""
        return _WHITESPACE_RE.sub(" ", self.text.strip())

    @property
    def has_high_confidence(self) -> bool:
        return self.confidence >= 0.8

    @property
    def is_numeric(self) -> bool:
        return bool(re.fullmatch(r"\d+", self.text.strip()))

    @property
    def is_alphanumeric(self) -> bool:
        return bool(re.fullmatch(r"[a-zA-Z0-9\s]+", self.text.strip()))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TextFragment":
        """Build a fragment from the flat mapping emitted by OCR engines.

        Args:
            data: Mapping with ``text``, ``x``, ``y``, ``width``, ``height``
                and ``confidence`` keys, plus optional ``line``,
                ``paragraph`` and ``language``.

        Returns:
            The corresponding fragment.
        """
        return cls(
            text=str(data["text"]),
            box=BoundingBox(
                x=float(data.get("x", 0.0)),
                y=float(data.get("y", 0.0)),
                width=float(data.get("width", 0.0)),
                height=float(data.get("height", 0.0)),
            ),
            confidence=float(data["confidence"]),
            line=data.get("line"),
            paragraph=data.get("paragraph"),
            language=data.get("language"),
        )


def joined_text(fragments: Iterable[TextFragment], separator: str = " ") -> str:
    """Join raw fragment texts in reading order."""
    return separator.join(f.text for f in fragments)


def mean_confidence(fragments: Iterable[TextFragment]) -> float:
    """Arithmetic mean of fragment confidences, 0.0 when empty."""
    scores = [f.confidence for f in fragments]
    return sum(scores) / len(scores) if scores else 0.0
