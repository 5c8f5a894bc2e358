"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from docscan.utils.config import AppConfig, OCRConfig, ScannerConfig, load_config
from docscan.utils.exceptions import ConfigurationError


class TestScannerConfig:
    """Tests for ScannerConfig defaults, presets and validation."""

    def test_defaults(self) -> None:
        cfg = ScannerConfig()
        assert cfg.confidence_threshold == 0.8
        assert cfg.allowed_languages == ["en"]
        assert cfg.custom_validators == {}
        assert cfg.mask_sensitive_data_in_logs is True
        assert cfg.debug_mode is False
        assert cfg.min_classification_score == 2.0

    def test_presets(self) -> None:
        assert ScannerConfig.high_security().confidence_threshold == 0.9
        assert ScannerConfig.healthcare().confidence_threshold == 0.85
        assert ScannerConfig.financial().confidence_threshold == 0.95

        dev = ScannerConfig.development()
        assert dev.confidence_threshold == 0.6
        assert dev.mask_sensitive_data_in_logs is False
        assert dev.debug_mode is True

    def test_threshold_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScannerConfig(confidence_threshold=1.5)
        with pytest.raises(ValidationError):
            ScannerConfig(confidence_threshold=-0.1)

    def test_custom_validators(self) -> None:
        cfg = ScannerConfig(custom_validators={"pan": lambda v: v.startswith("A")})
        assert cfg.custom_validators["pan"]("ABCDE1234F") is True

    def test_threshold_override_keeps_validators(self) -> None:
        cfg = ScannerConfig(custom_validators={"pan": lambda v: False})
        copy = cfg.model_copy(update={"confidence_threshold": 0.5})
        assert copy.confidence_threshold == 0.5
        assert "pan" in copy.custom_validators


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.tesseract_cmd is None
        assert cfg.psm == 3

    def test_override(self) -> None:
        cfg = OCRConfig(tesseract_cmd="/usr/bin/tesseract", psm=6)
        assert cfg.psm == 6


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.scanner, ScannerConfig)
        assert isinstance(cfg.ocr, OCRConfig)
        assert cfg.log_level == "INFO"

    def test_effective_log_level(self) -> None:
        assert AppConfig(log_level="WARNING").effective_log_level == "WARNING"
        cfg = AppConfig(log_level="WARNING", scanner=ScannerConfig.development())
        assert cfg.effective_log_level == "DEBUG"


class TestLoadConfig:
    """Tests for YAML configuration loading."""

    def test_load_project_config(self, config_dir: Path) -> None:
        cfg = load_config(config_dir / "config.yaml")
        assert cfg.log_level == "INFO"
        assert cfg.scanner.confidence_threshold == 0.8
        assert cfg.scanner.allowed_languages == ["en"]
        assert cfg.ocr.psm == 3

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(tmp_path / "missing.yaml")
        assert cfg == AppConfig()

    def test_partial_override(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.dump({"log_level": "DEBUG", "scanner": {"confidence_threshold": 0.6}})
        )
        cfg = load_config(path)
        assert cfg.log_level == "DEBUG"
        assert cfg.scanner.confidence_threshold == 0.6
        assert cfg.scanner.min_classification_score == 2.0

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert exc_info.value.details == {"type": "list"}

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"scanner": {"confidence_threshold": 2}}))
        with pytest.raises(ValidationError):
            load_config(path)
