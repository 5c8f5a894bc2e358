"""Dispatch from document type to its field extractor."""

from functools import partial

from docscan.extraction.base import ExtractedDocument, FieldExtractor
from docscan.extraction.cards import extract_card
from docscan.extraction.generic import extract_generic
from docscan.extraction.identity import (
    extract_aadhaar,
    extract_driving_license,
    extract_pan,
    extract_voter_id,
)
from docscan.extraction.passport import extract_passport
from docscan.extraction.structured import (
    extract_health_insurance,
    extract_invoice,
    extract_lab_report,
    extract_receipt,
)
from docscan.models.document_type import DocumentType
from docscan.ocr.fragments import TextFragment
from docscan.utils.config import ScannerConfig
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

EXTRACTORS: dict[DocumentType, FieldExtractor] = {
    DocumentType.AADHAAR: extract_aadhaar,
    DocumentType.PAN: extract_pan,
    DocumentType.VOTER_ID: extract_voter_id,
    DocumentType.DRIVING_LICENSE: extract_driving_license,
    DocumentType.PASSPORT: extract_passport,
    DocumentType.NATIONAL_ID: partial(
        extract_generic, suggested_type=DocumentType.NATIONAL_ID
    ),
    DocumentType.GLOBAL_DRIVER_LICENSE: partial(
        extract_generic, suggested_type=DocumentType.GLOBAL_DRIVER_LICENSE
    ),
    DocumentType.CREDIT_CARD: partial(extract_card, doc_type=DocumentType.CREDIT_CARD),
    DocumentType.DEBIT_CARD: partial(extract_card, doc_type=DocumentType.DEBIT_CARD),
    DocumentType.INVOICE: extract_invoice,
    DocumentType.RECEIPT: extract_receipt,
    DocumentType.HEALTH_INSURANCE: extract_health_insurance,
    DocumentType.LAB_REPORT: extract_lab_report,
    DocumentType.GENERIC: extract_generic,
}


def extract(
    doc_type: DocumentType,
    fragments: list[TextFragment],
    config: ScannerConfig | None = None,
) -> ExtractedDocument | None:
    """Run the field extractor registered for ``doc_type``.

    Args:
        doc_type: Document type to extract.
        fragments: OCR fragments in reading order.
        config: Scanner configuration carrying custom validators.

    Returns:
        The extracted record, or ``None`` when there are no fragments or
        the document's identifying number could not be found.
    """
    if not fragments:
        return None

    document = EXTRACTORS[doc_type](fragments, config)
    if document is None:
        logger.info("Extraction for '%s' found no usable record", doc_type.value)
    return document
