"""Document scanning system.

Turns positioned OCR text fragments into classified, checksum-validated
records for identity documents, payment cards, passports, invoices,
receipts and healthcare documents, or a graded fallback when the text
is not confident enough.
"""

__version__ = "1.0.0"

from docscan.classification.classifier import classify  # noqa: E402
from docscan.extraction.registry import extract  # noqa: E402
from docscan.pipeline import scan  # noqa: E402

__all__ = ["__version__", "classify", "extract", "scan"]
