"""Configuration management for the document scanning pipeline.

Loads and validates YAML configuration with sensible defaults for the
confidence gate, classification, OCR adapter, and logging settings.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from docscan.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ScannerConfig(BaseModel):
    """Configuration consumed by the classification and extraction core.

    ``custom_validators`` maps a document type identifier (for example
    ``"aadhaar"``) to a predicate over that document's primary identifier.
    """

    confidence_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    allowed_languages: list[str] = Field(default_factory=lambda: ["en"])
    custom_validators: dict[str, Callable[[str], bool]] = Field(default_factory=dict)
    mask_sensitive_data_in_logs: bool = True
    debug_mode: bool = False
    min_classification_score: float = 2.0

    @classmethod
    def high_security(cls) -> "ScannerConfig":
        """Strict gate for environments that prefer manual review."""
        return cls(confidence_threshold=0.9, mask_sensitive_data_in_logs=True)

    @classmethod
    def development(cls) -> "ScannerConfig":
        """Lenient gate with verbose, unmasked logging."""
        return cls(
            confidence_threshold=0.6,
            mask_sensitive_data_in_logs=False,
            debug_mode=True,
        )

    @classmethod
    def healthcare(cls) -> "ScannerConfig":
        """Gate tuned for insurance cards and lab reports."""
        return cls(confidence_threshold=0.85, mask_sensitive_data_in_logs=True)

    @classmethod
    def financial(cls) -> "ScannerConfig":
        """Gate tuned for payment cards."""
        return cls(confidence_threshold=0.95, mask_sensitive_data_in_logs=True)


class OCRConfig(BaseModel):
    """Configuration for the Tesseract fragment source."""

    tesseract_cmd: str | None = None
    psm: int = 3


class AppConfig(BaseModel):
    """Top-level application configuration."""

    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    log_level: str = "INFO"

    @property
    def effective_log_level(self) -> str:
        """Log level to install, forced to DEBUG in scanner debug mode."""
        return "DEBUG" if self.scanner.debug_mode else self.log_level


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {path}",
                {"type": type(raw).__name__},
            )
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
