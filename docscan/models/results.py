"""Terminal outcomes of a scan and the error kinds a scan can report."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, Union

from docscan.models.documents import Document

T = TypeVar("T")


@dataclass(frozen=True)
class ScanErrorKind:
    """Base for the reasons a scan could not produce a result."""

    message: str


@dataclass(frozen=True)
class CameraPermissionDenied(ScanErrorKind):
    message: str = "Camera permission denied"


@dataclass(frozen=True)
class CameraNotAvailable(ScanErrorKind):
    message: str = "Camera not available"


@dataclass(frozen=True)
class UserCancelled(ScanErrorKind):
    message: str = "User cancelled scanning"


@dataclass(frozen=True)
class ScanTimeout(ScanErrorKind):
    message: str = "Scanning timed out"


@dataclass(frozen=True, init=False)
class OcrProcessingFailed(ScanErrorKind):
    """OCR produced nothing usable; ``detail`` is appended to the message."""

    detail: str | None = None

    def __init__(self, detail: str | None = None) -> None:
        message = "OCR processing failed"
        if detail is not None:
            message = f"{message}: {detail}"
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "detail", detail)


@dataclass(frozen=True)
class GenericError(ScanErrorKind):
    pass


@dataclass(frozen=True)
class _ScanResultBase:
    status: ClassVar[str]

    @property
    def is_success(self) -> bool:
        return isinstance(self, ScanSuccess)

    @property
    def is_unclear(self) -> bool:
        return isinstance(self, ScanUnclear)

    @property
    def is_error(self) -> bool:
        return isinstance(self, ScanError)

    def when(
        self,
        success: Callable[[Document], T],
        unclear: Callable[[str, float], T],
        error: Callable[[ScanErrorKind], T],
    ) -> T:
        """Dispatch on the outcome, calling exactly one of the handlers."""
        if isinstance(self, ScanSuccess):
            return success(self.document)
        if isinstance(self, ScanUnclear):
            return unclear(self.raw_text, self.confidence)
        if isinstance(self, ScanError):
            return error(self.error)
        raise TypeError(f"Unknown scan result: {type(self).__name__}")

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        return self.when(
            success=lambda doc: {
                "status": "success",
                "document": doc.to_dict(mask_sensitive),
                "summary": doc.to_summary(),
            },
            unclear=lambda raw, conf: {
                "status": "unclear",
                "raw_text": raw,
                "confidence": conf,
            },
            error=lambda err: {
                "status": "error",
                "error_type": type(err).__name__,
                "message": err.message,
            },
        )


@dataclass(frozen=True)
class ScanSuccess(_ScanResultBase):
    """A document was classified, extracted and passed the confidence gate."""

    status: ClassVar[str] = "success"

    document: Document


@dataclass(frozen=True)
class ScanUnclear(_ScanResultBase):
    """Text was read but could not be turned into a confident record."""

    status: ClassVar[str] = "unclear"

    raw_text: str
    confidence: float


@dataclass(frozen=True)
class ScanError(_ScanResultBase):
    """The scan failed outright."""

    status: ClassVar[str] = "error"

    error: ScanErrorKind


ScanResult = Union[ScanSuccess, ScanUnclear, ScanError]
