"""Exception hierarchy for the document scanning system.

Exception Hierarchy:
    DocScanError (base)
    ├── ConfigurationError
    └── OCRError
        ├── OCREngineNotAvailableError
        └── OCRProcessingError

Validators and extractors never raise; these exceptions belong to the
collaborators around the core (configuration loading and the OCR
fragment source) and are translated into scan results by the pipeline.
"""


class DocScanError(Exception):
    """Base exception for all document scanning errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DocScanError):
    """Raised when configuration values cannot be interpreted."""


class OCRError(DocScanError):
    """Base exception for OCR collaborator errors."""


class OCREngineNotAvailableError(OCRError):
    """Raised when the OCR engine binary cannot be found or started."""

    def __init__(self, engine_name: str) -> None:
        message = f"OCR engine not available: {engine_name}"
        super().__init__(message, {"engine": engine_name})


class OCRProcessingError(OCRError):
    """Raised when the OCR engine fails to produce text fragments."""

    def __init__(self, reason: str | None = None) -> None:
        message = "OCR processing failed"
        super().__init__(message, {"reason": reason} if reason else None)
        self.reason = reason


__all__ = [
    "DocScanError",
    "ConfigurationError",
    "OCRError",
    "OCREngineNotAvailableError",
    "OCRProcessingError",
]
