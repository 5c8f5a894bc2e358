"""Tests for OCR fragment geometry and helpers."""

import pytest

from docscan.ocr.fragments import (
    BoundingBox,
    Point,
    TextFragment,
    joined_text,
    mean_confidence,
)


class TestBoundingBox:
    """Tests for the BoundingBox data class."""

    def test_center_and_area(self) -> None:
        box = BoundingBox(x=10, y=20, width=100, height=50)
        assert box.center == Point(60, 45)
        assert box.area == 5000

    def test_contains_includes_edges(self) -> None:
        box = BoundingBox(0, 0, 10, 10)
        assert box.contains(Point(0, 0))
        assert box.contains(Point(10, 10))
        assert not box.contains(Point(10.1, 5))

    def test_intersects(self) -> None:
        box = BoundingBox(0, 0, 10, 10)
        assert box.intersects(BoundingBox(5, 5, 10, 10))
        assert not box.intersects(BoundingBox(10, 0, 10, 10))
        assert not box.intersects(BoundingBox(20, 20, 5, 5))

    def test_union(self) -> None:
        union = BoundingBox.union(
            [BoundingBox(10, 10, 50, 20), BoundingBox(70, 40, 30, 10)]
        )
        assert union == BoundingBox(10, 10, 90, 40)


class TestTextFragment:
    """Tests for the TextFragment data class."""

    def test_normalized_text(self) -> None:
        fragment = TextFragment("  John \t  Doe ", BoundingBox(0, 0, 1, 1), 0.9)
        assert fragment.normalized_text == "John Doe"

    def test_flags(self) -> None:
        box = BoundingBox(0, 0, 1, 1)
        assert TextFragment("12345", box, 0.8).is_numeric
        assert TextFragment("12345", box, 0.8).has_high_confidence
        assert not TextFragment("12a45", box, 0.79).is_numeric
        assert not TextFragment("12a45", box, 0.79).has_high_confidence
        assert TextFragment("ABC 123", box, 0.5).is_alphanumeric
        assert not TextFragment("A/B", box, 0.5).is_alphanumeric

    def test_from_dict(self) -> None:
        fragment = TextFragment.from_dict(
            {
                "text": "Hello",
                "x": 1,
                "y": 2,
                "width": 30,
                "height": 10,
                "confidence": 0.75,
                "line": 3,
            }
        )
        assert fragment.text == "Hello"
        assert fragment.box == BoundingBox(1.0, 2.0, 30.0, 10.0)
        assert fragment.confidence == 0.75
        assert fragment.line == 3
        assert fragment.language is None

    def test_from_dict_requires_text(self) -> None:
        with pytest.raises(KeyError):
            TextFragment.from_dict({"confidence": 0.5})


class TestHelpers:
    """Tests for joined_text and mean_confidence."""

    def test_joined_text(self, fragments) -> None:
        frags = fragments("Government of India", "2341 2341 2346")
        assert joined_text(frags) == "Government of India 2341 2341 2346"
        assert joined_text(frags, "\n") == "Government of India\n2341 2341 2346"

    def test_mean_confidence(self, fragments) -> None:
        assert mean_confidence(fragments("a", "b", confidence=0.5)) == 0.5
        assert mean_confidence([]) == 0.0
