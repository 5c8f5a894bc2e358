"""Pydantic request/response schemas for the FastAPI endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from docscan.models.document_type import DocumentType
from docscan.ocr.fragments import BoundingBox, TextFragment


class FragmentIn(BaseModel):
    """A positioned OCR fragment as sent by clients."""

    text: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    confidence: float = Field(ge=0.0, le=1.0)
    line: int | None = None
    paragraph: int | None = None
    language: str | None = None

    def to_fragment(self) -> TextFragment:
        return TextFragment(
            text=self.text,
            box=BoundingBox(self.x, self.y, self.width, self.height),
            confidence=self.confidence,
            line=self.line,
            paragraph=self.paragraph,
            language=self.language,
        )


class ScanRequest(BaseModel):
    """Request schema for a full scan."""

    fragments: list[FragmentIn]
    allowed_types: list[DocumentType] | None = None
    confidence_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    mask_sensitive_data: bool = True


class ClassifyRequest(BaseModel):
    """Request schema for classification only."""

    fragments: list[FragmentIn]
    allowed_types: list[DocumentType] | None = None


class ExtractRequest(BaseModel):
    """Request schema for extraction with a known document type."""

    fragments: list[FragmentIn]
    mask_sensitive_data: bool = True


class ScanResponse(BaseModel):
    """Response schema for a scan; fields depend on ``status``."""

    status: str
    document: dict[str, Any] | None = None
    summary: dict[str, str] | None = None
    raw_text: str | None = None
    confidence: float | None = None
    error_type: str | None = None
    message: str | None = None


class ClassifyResponse(BaseModel):
    """Response schema for classification."""

    document_type: str | None
    display_name: str | None = None
    scores: dict[str, float]


class ExtractResponse(BaseModel):
    """Response schema for extraction."""

    document_type: str
    document: dict[str, Any] | None = None
    summary: dict[str, str] | None = None


class DocumentTypeInfo(BaseModel):
    """Information about a supported document type."""

    identifier: str
    display_name: str
    keywords: list[str]
    confidence_threshold: float
    is_identity_document: bool
    is_financial_document: bool
    is_healthcare_document: bool
    contains_pii: bool


class DocumentTypesResponse(BaseModel):
    """Response schema listing supported document types."""

    document_types: list[DocumentTypeInfo]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
