"""Tests for passport MRZ parsing and visual-zone fallback."""

import pytest

from docscan.extraction.passport import extract_passport, find_td3_lines, parse_td3
from docscan.models.document_type import DocumentType
from docscan.models.documents import FieldValue, GenericDocument, PassportDocument
from docscan.utils.config import ScannerConfig


class TestFindTd3Lines:
    """Tests for locating the MRZ pair."""

    def test_finds_consecutive_lines(self, fragments, mrz_lines) -> None:
        frags = fragments("PASSPORT", *mrz_lines)
        assert find_td3_lines(frags) == mrz_lines

    def test_spaces_inside_lines_ignored(self, fragments, mrz_lines) -> None:
        spaced = mrz_lines[1][:22] + " " + mrz_lines[1][22:]
        assert find_td3_lines(fragments(mrz_lines[0], spaced)) == mrz_lines

    def test_requires_p_document_code(self, fragments, mrz_lines) -> None:
        line1 = "I" + mrz_lines[0][1:]
        assert find_td3_lines(fragments(line1, mrz_lines[1])) is None

    def test_wrong_length(self, fragments, mrz_lines) -> None:
        assert find_td3_lines(fragments(mrz_lines[0][:40], mrz_lines[1])) is None


class TestParseTd3:
    """Tests for TD3 field parsing."""

    def setup_method(self) -> None:
        self.line1 = "P<UTOERIKSSON<<ANNA<MARIA".ljust(44, "<")
        self.line2 = "L898902C36UTO7408122F1204159ZE184226B<<<<<10"

    def test_specimen(self) -> None:
        doc = parse_td3(self.line1, self.line2)
        assert doc.passport_number == FieldValue("L898902C3", 0.9)
        assert doc.surname == FieldValue("ERIKSSON", 0.9)
        assert doc.given_names == FieldValue("ANNA MARIA", 0.9)
        assert doc.nationality == FieldValue("UTO", 0.9)
        assert doc.date_of_birth == FieldValue("1974-08-12", 0.9)
        assert doc.gender == FieldValue("F", 0.9)
        assert doc.date_of_expiry == FieldValue("2012-04-15", 0.9)
        assert doc.issuing_authority == FieldValue("UTO", 0.9)
        assert doc.personal_number == FieldValue("ZE184226B", 0.9)
        assert doc.mrz_lines == (self.line1, self.line2)

    def test_derived_properties(self) -> None:
        doc = parse_td3(self.line1, self.line2)
        assert doc.full_name == "ANNA MARIA ERIKSSON"
        assert doc.country_name == "UTO"

    def test_failed_check_digit_lowers_confidence(self) -> None:
        line2 = self.line2[:9] + "7" + self.line2[10:]
        doc = parse_td3(self.line1, line2)
        assert doc.passport_number == FieldValue("L898902C3", 0.7)
        assert doc.date_of_birth.confidence == 0.9

    def test_visual_zone_fields_missing(self) -> None:
        doc = parse_td3(self.line1, self.line2)
        assert doc.place_of_birth == FieldValue("Place of birth not detected", 0.0)
        assert doc.date_of_issue.confidence == 0.0

    def test_visual_zone_fields_found(self, fragments) -> None:
        frags = fragments("Place of Birth: STOCKHOLM", "Date of Issue: 15/04/2002")
        doc = parse_td3(self.line1, self.line2, frags)
        assert doc.place_of_birth == FieldValue("STOCKHOLM", 0.8)
        assert doc.date_of_issue == FieldValue("15/04/2002", 0.8)

    def test_unspecified_sex(self) -> None:
        line2 = self.line2[:20] + "<" + self.line2[21:]
        assert parse_td3(self.line1, line2).gender.value == "X"

    def test_empty_personal_number(self) -> None:
        line2 = self.line2[:28] + "<" * 14 + "<" + self.line2[43]
        assert parse_td3(self.line1, line2).personal_number is None

    def test_known_country_name(self) -> None:
        line2 = self.line2[:10] + "IND" + self.line2[13:]
        assert parse_td3(self.line1, line2).country_name == "India"


class TestExtractPassport:
    """Tests for the passport extractor."""

    def test_mrz_preferred(self, fragments, mrz_lines) -> None:
        doc = extract_passport(fragments("PASSPORT", "UTOPIA", *mrz_lines))
        assert isinstance(doc, PassportDocument)
        assert doc.passport_number.value == "L898902C3"
        assert doc.overall_confidence == pytest.approx(0.9)

    def test_visual_zone_fallback(self, fragments) -> None:
        doc = extract_passport(
            fragments("REPUBLIC OF INDIA", "Passport No: K1234567", "01/02/1990")
        )
        assert isinstance(doc, GenericDocument)
        assert doc.suggested_document_type == DocumentType.PASSPORT
        assert doc.detected_fields["passport_number"].value == "K1234567"
        assert doc.detected_fields["date_of_birth"].value == "01/02/1990"
        assert doc.extraction_confidence == 0.75

    def test_visual_zone_without_fields(self, fragments) -> None:
        doc = extract_passport(fragments("12345"))
        assert isinstance(doc, GenericDocument)
        assert doc.detected_fields == {}
        assert doc.extraction_confidence == 0.5

    def test_custom_validator_rejects_mrz_number(self, fragments, mrz_lines) -> None:
        config = ScannerConfig(custom_validators={"passport": lambda n: False})
        doc = extract_passport(fragments(*mrz_lines), config)
        assert isinstance(doc, GenericDocument)
        assert "passport_number" not in doc.detected_fields
