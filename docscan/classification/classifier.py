"""Keyword and checksum scoring to identify the document type.

Each candidate type earns one point per keyword found in the recognized
text plus bonuses for structural evidence: checksum-valid identifier
numbers, voter and licence number layouts, and passport MRZ lines. The
highest scoring type wins if it clears a minimum score.
"""

import re
from collections.abc import Callable, Iterable

from docscan.extraction.candidates import (
    Candidate,
    extract_aadhaar_candidates,
    extract_card_candidates,
    extract_pan_candidates,
)
from docscan.models.document_type import DocumentType
from docscan.ocr.fragments import TextFragment
from docscan.utils.logger import get_logger
from docscan.validation.validators import (
    is_mrz_line,
    is_valid_aadhaar,
    is_valid_card_number,
    is_valid_pan,
)

logger = get_logger(__name__)

DEFAULT_MIN_SCORE = 2.0
DEFAULT_CHECKSUM_WEIGHT = 5.0

_VOTER_KEYWORDS = ("election commission", "elector", "epic")
_VOTER_NUMBER_RE = re.compile(r"\b(?:[A-Z]{3}[0-9]{7}|[A-Z]{2}[0-9]{8})\b")
_LICENSE_KEYWORDS = ("driving licence", "driving license", "transport")
_LICENSE_NUMBER_RE = re.compile(r"\b[A-Z]{2}[0-9]{13}\b")

_KEYWORD_BONUS = 3.0
_NUMBER_LAYOUT_BONUS = 2.0
_MRZ_WEIGHT = 3.0

# candidate extractor and the validator its numbers must pass
_CHECKSUM_EVIDENCE: dict[
    DocumentType,
    tuple[Callable[[list[TextFragment]], list[Candidate]], Callable[[str], bool]],
] = {
    DocumentType.AADHAAR: (extract_aadhaar_candidates, is_valid_aadhaar),
    DocumentType.PAN: (extract_pan_candidates, is_valid_pan),
    DocumentType.CREDIT_CARD: (extract_card_candidates, is_valid_card_number),
    DocumentType.DEBIT_CARD: (extract_card_candidates, is_valid_card_number),
}


class DocumentClassifier:
    """Scores fragments against every candidate document type.

    Args:
        min_score: Lowest winning score that still yields a classification.
        checksum_weight: Score per unit of confidence for each identifier
            number that passes its checksum.
    """

    def __init__(
        self,
        min_score: float = DEFAULT_MIN_SCORE,
        checksum_weight: float = DEFAULT_CHECKSUM_WEIGHT,
    ) -> None:
        self.min_score = min_score
        self.checksum_weight = checksum_weight

    def score(
        self,
        fragments: list[TextFragment],
        allowed_types: Iterable[DocumentType] | None = None,
    ) -> dict[DocumentType, float]:
        """Score each allowed type, keeping only types with a non-zero score.

        Args:
            fragments: OCR fragments in reading order.
            allowed_types: Types to consider. ``None`` means all types.

        Returns:
            Scores keyed by type, in enumeration declaration order.
        """
        if not fragments:
            return {}

        allowed = set(allowed_types) if allowed_types is not None else set(DocumentType)
        text = " ".join(f.normalized_text for f in fragments)
        lowered = text.lower()

        scores: dict[DocumentType, float] = {}
        for doc_type in DocumentType:
            if doc_type not in allowed:
                continue
            value = float(sum(1 for kw in doc_type.keywords if kw in lowered))
            value += self._bonus(doc_type, fragments, text, lowered)
            if value > 0:
                scores[doc_type] = value
        return scores

    def _bonus(
        self,
        doc_type: DocumentType,
        fragments: list[TextFragment],
        text: str,
        lowered: str,
    ) -> float:
        if doc_type in _CHECKSUM_EVIDENCE:
            extractor, validator = _CHECKSUM_EVIDENCE[doc_type]
            return sum(
                self.checksum_weight * c.confidence
                for c in extractor(fragments)
                if validator(c.number)
            )

        bonus = 0.0
        if doc_type is DocumentType.VOTER_ID:
            if any(kw in lowered for kw in _VOTER_KEYWORDS):
                bonus += _KEYWORD_BONUS
            if _VOTER_NUMBER_RE.search(text):
                bonus += _NUMBER_LAYOUT_BONUS
        elif doc_type is DocumentType.DRIVING_LICENSE:
            if any(kw in lowered for kw in _LICENSE_KEYWORDS):
                bonus += _KEYWORD_BONUS
            if _LICENSE_NUMBER_RE.search(text):
                bonus += _NUMBER_LAYOUT_BONUS
        elif doc_type is DocumentType.PASSPORT:
            bonus += sum(
                _MRZ_WEIGHT * f.confidence
                for f in fragments
                if is_mrz_line(f.normalized_text)
            )
        return bonus

    def classify(
        self,
        fragments: list[TextFragment],
        allowed_types: Iterable[DocumentType] | None = None,
    ) -> DocumentType | None:
        """Pick the best scoring document type.

        Ties go to the type declared first in ``DocumentType``.

        Args:
            fragments: OCR fragments in reading order.
            allowed_types: Types to consider. ``None`` means all types.

        Returns:
            The winning type, or ``None`` when nothing scores at least
            ``min_score``.
        """
        scores = self.score(fragments, allowed_types)
        if not scores:
            return None

        best_type: DocumentType | None = None
        best_score = 0.0
        for doc_type, value in scores.items():
            if value > best_score:
                best_type, best_score = doc_type, value

        if best_type is None or best_score < self.min_score:
            logger.debug(
                "No document type reached %.1f (best %.2f)",
                self.min_score,
                best_score,
            )
            return None

        logger.info(
            "Classified document as '%s' (score=%.2f)", best_type.value, best_score
        )
        return best_type


def classify(
    fragments: list[TextFragment],
    allowed_types: Iterable[DocumentType] | None = None,
) -> DocumentType | None:
    """Classify fragments with the default scoring parameters."""
    return DocumentClassifier().classify(fragments, allowed_types)
