"""FastAPI application for the document scanning API.

Provides REST endpoints for scanning, classifying and extracting
documents from OCR fragments, listing document types, and health checks.
"""

import shutil
from typing import Annotated

from fastapi import FastAPI, HTTPException, Path
from fastapi.middleware.cors import CORSMiddleware

from docscan import __version__
from docscan.classification.classifier import DocumentClassifier
from docscan.extraction.registry import extract
from docscan.models.document_type import DocumentType
from docscan.ocr.fragments import TextFragment
from docscan.pipeline import ScanPipeline
from docscan.utils.config import ScannerConfig, load_config
from docscan.utils.logger import get_logger

from .schemas import (
    ClassifyRequest,
    ClassifyResponse,
    DocumentTypeInfo,
    DocumentTypesResponse,
    ExtractRequest,
    ExtractResponse,
    FragmentIn,
    HealthResponse,
    ScanRequest,
    ScanResponse,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Document Scanner API",
    description="Classify OCR text and extract validated identity, card "
    "and financial document fields",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_scanner_config() -> ScannerConfig:
    """Load the scanner section of the application configuration."""
    return load_config().scanner


def _to_fragments(items: list[FragmentIn]) -> list[TextFragment]:
    return [item.to_fragment() for item in items]


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/document-types", response_model=DocumentTypesResponse)
async def list_document_types() -> DocumentTypesResponse:
    """List supported document types and their classification profiles."""
    return DocumentTypesResponse(
        document_types=[
            DocumentTypeInfo(
                identifier=doc_type.value,
                display_name=doc_type.display_name,
                keywords=list(doc_type.keywords),
                confidence_threshold=doc_type.recommended_confidence_threshold,
                is_identity_document=doc_type.is_identity_document,
                is_financial_document=doc_type.is_financial_document,
                is_healthcare_document=doc_type.is_healthcare_document,
                contains_pii=doc_type.contains_pii,
            )
            for doc_type in DocumentType
        ]
    )


@app.post("/scan", response_model=ScanResponse)
async def scan_document(request: ScanRequest) -> ScanResponse:
    """Classify fragments, extract fields and apply the confidence gate.

    Args:
        request: Fragments plus optional type filter and threshold override.

    Returns:
        The scan outcome with masked identifiers unless masking is disabled.
    """
    config = _get_scanner_config()
    if request.confidence_threshold is not None:
        config = config.model_copy(
            update={"confidence_threshold": request.confidence_threshold}
        )

    try:
        result = ScanPipeline(config=config).scan(
            _to_fragments(request.fragments), request.allowed_types
        )
    except Exception as exc:
        logger.error("Scan failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ScanResponse(**result.to_dict(request.mask_sensitive_data))


@app.post("/classify", response_model=ClassifyResponse)
async def classify_document(request: ClassifyRequest) -> ClassifyResponse:
    """Score fragments against every allowed document type."""
    config = _get_scanner_config()
    classifier = DocumentClassifier(min_score=config.min_classification_score)
    fragments = _to_fragments(request.fragments)

    scores = classifier.score(fragments, request.allowed_types)
    detected = classifier.classify(fragments, request.allowed_types)
    return ClassifyResponse(
        document_type=detected.value if detected else None,
        display_name=detected.display_name if detected else None,
        scores={doc_type.value: value for doc_type, value in scores.items()},
    )


@app.post("/extract/{document_type}", response_model=ExtractResponse)
async def extract_document(
    document_type: Annotated[DocumentType, Path()],
    request: ExtractRequest,
) -> ExtractResponse:
    """Extract fields for a caller-chosen document type, skipping the gate."""
    if not request.fragments:
        raise HTTPException(status_code=400, detail="No fragments supplied")

    try:
        document = extract(
            document_type, _to_fragments(request.fragments), _get_scanner_config()
        )
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ExtractResponse(
        document_type=document_type.value,
        document=document.to_dict(request.mask_sensitive_data) if document else None,
        summary=document.to_summary() if document else None,
    )
