"""End-to-end scanning: classify fragments, extract fields, gate on confidence.

The pipeline is the single place where "no text" becomes an error and
"not confident enough" becomes an unclear result. Any unexpected failure
inside classification or extraction is reported as a ``GenericError``
instead of propagating to the caller.
"""

from collections.abc import Iterable
from typing import Any

from docscan.classification.classifier import DocumentClassifier
from docscan.extraction.registry import extract
from docscan.models.document_type import DocumentType
from docscan.models.results import (
    GenericError,
    OcrProcessingFailed,
    ScanError,
    ScanResult,
    ScanSuccess,
    ScanUnclear,
)
from docscan.ocr.fragments import TextFragment, joined_text, mean_confidence
from docscan.ocr.tesseract_engine import FragmentSource
from docscan.utils.config import ScannerConfig
from docscan.utils.exceptions import OCRProcessingError
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

NO_TEXT_DETECTED = "No text detected"


class ScanPipeline:
    """Runs classification, extraction and the confidence gate.

    Args:
        config: Scanner configuration. Defaults to ``ScannerConfig()``.
        classifier: Classifier to use. Defaults to one built with the
            configured minimum classification score.
        source: OCR fragment source used by ``scan_image``.
    """

    def __init__(
        self,
        config: ScannerConfig | None = None,
        classifier: DocumentClassifier | None = None,
        source: FragmentSource | None = None,
    ) -> None:
        self.config = config or ScannerConfig()
        self.classifier = classifier or DocumentClassifier(
            min_score=self.config.min_classification_score
        )
        self.source = source

    def scan(
        self,
        fragments: list[TextFragment],
        allowed_types: Iterable[DocumentType] | None = None,
    ) -> ScanResult:
        """Turn OCR fragments into a scan result.

        Args:
            fragments: OCR fragments in reading order.
            allowed_types: Document types to consider. ``None`` means all.

        Returns:
            ``ScanSuccess`` with the extracted record, ``ScanUnclear`` with
            the raw text when confidence is too low, or ``ScanError``.
        """
        if not fragments:
            logger.warning("Scan received no fragments")
            return ScanError(OcrProcessingFailed(NO_TEXT_DETECTED))

        try:
            return self._scan(list(fragments), allowed_types)
        except Exception as exc:
            logger.exception("Scan failed: %s", exc)
            return ScanError(GenericError(str(exc)))

    def _scan(
        self,
        fragments: list[TextFragment],
        allowed_types: Iterable[DocumentType] | None,
    ) -> ScanResult:
        threshold = self.config.confidence_threshold
        raw_text = joined_text(fragments)
        text_confidence = mean_confidence(fragments)

        detected = self.classifier.classify(fragments, allowed_types)
        if detected is None and text_confidence < threshold:
            logger.info(
                "Unclassified text below threshold (%.2f < %.2f)",
                text_confidence,
                threshold,
            )
            return ScanUnclear(raw_text, text_confidence)

        doc_type = detected or DocumentType.GENERIC
        document = extract(doc_type, fragments, self.config)
        if document is None:
            return ScanUnclear(raw_text, text_confidence)

        confidence = document.overall_confidence
        if confidence < threshold:
            logger.info(
                "%s extraction below threshold (%.2f < %.2f)",
                doc_type.display_name,
                confidence,
                threshold,
            )
            return ScanUnclear(raw_text, confidence)

        logger.info("Scanned %s (confidence=%.2f)", doc_type.display_name, confidence)
        return ScanSuccess(document)

    def scan_image(
        self,
        image: Any,
        allowed_types: Iterable[DocumentType] | None = None,
    ) -> ScanResult:
        """Run OCR on an image, then scan the resulting fragments.

        Args:
            image: Image accepted by the configured fragment source.
            allowed_types: Document types to consider. ``None`` means all.

        Returns:
            The scan result; OCR failures become ``OcrProcessingFailed``.

        Raises:
            ValueError: If the pipeline has no fragment source.
        """
        if self.source is None:
            raise ValueError("scan_image requires a fragment source")

        try:
            fragments = self.source.extract_fragments(
                image, self.config.allowed_languages
            )
        except OCRProcessingError as exc:
            logger.error("OCR failed: %s", exc)
            return ScanError(OcrProcessingFailed(exc.reason))

        return self.scan(fragments, allowed_types)


def scan(
    fragments: list[TextFragment],
    allowed_types: Iterable[DocumentType] | None = None,
    config: ScannerConfig | None = None,
) -> ScanResult:
    """Scan fragments with a fresh pipeline."""
    return ScanPipeline(config=config).scan(fragments, allowed_types)


def scan_image(
    image: Any,
    source: FragmentSource,
    allowed_types: Iterable[DocumentType] | None = None,
    config: ScannerConfig | None = None,
) -> ScanResult:
    """Run OCR through ``source`` and scan the resulting fragments."""
    return ScanPipeline(config=config, source=source).scan_image(image, allowed_types)
