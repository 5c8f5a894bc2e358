"""Tests for checksum validators and identifier masking."""

from datetime import date

import pytest

from docscan.validation.masking import (
    mask_aadhaar_number,
    mask_card_number,
    mask_digits,
    mask_pan_number,
)
from docscan.validation.validators import (
    get_card_brand,
    is_mrz_line,
    is_valid_aadhaar,
    is_valid_card_number,
    is_valid_expiry_date,
    is_valid_mrz_field,
    is_valid_pan,
    is_valid_passport_number,
    luhn_check,
    mrz_check_digit,
    strip_separators,
    verhoeff_check,
)


def _single_digit_alterations(digits: str, position: int) -> list[str]:
    """Every number that differs from ``digits`` only at ``position``."""
    return [
        digits[:position] + str(d) + digits[position + 1 :]
        for d in range(10)
        if str(d) != digits[position]
    ]


class TestLuhn:
    """Tests for the Luhn checksum."""

    @pytest.mark.parametrize(
        "digits",
        ["4111111111111111", "79927398713", "5555555555554444", "378282246310005"],
    )
    def test_valid_numbers(self, digits: str) -> None:
        assert luhn_check(digits) is True

    @pytest.mark.parametrize("position", range(16))
    def test_every_single_digit_alteration_detected(self, position: int) -> None:
        for altered in _single_digit_alterations("4111111111111111", position):
            assert luhn_check(altered) is False, altered

    def test_non_digits_rejected(self) -> None:
        assert luhn_check("4111-1111") is False
        assert luhn_check("") is False


class TestVerhoeff:
    """Tests for the Verhoeff checksum."""

    def test_valid_numbers(self) -> None:
        assert verhoeff_check("2363") is True
        assert verhoeff_check("234123412346") is True

    def test_wrong_check_digit(self) -> None:
        assert verhoeff_check("234123412347") is False

    @pytest.mark.parametrize("position", range(12))
    def test_every_single_digit_alteration_detected(self, position: int) -> None:
        for altered in _single_digit_alterations("234123412346", position):
            assert verhoeff_check(altered) is False, altered

    def test_non_digits_rejected(self) -> None:
        assert verhoeff_check("23a3") is False
        assert verhoeff_check("") is False


class TestAadhaar:
    """Tests for Aadhaar number validation."""

    def test_valid_with_separators(self) -> None:
        assert is_valid_aadhaar("2341 2341 2346") is True
        assert is_valid_aadhaar("2341-2341-2346") is True

    def test_wrong_length(self) -> None:
        assert is_valid_aadhaar("23412341234") is False

    def test_leading_zero_or_one_rejected(self) -> None:
        assert is_valid_aadhaar("023412341234") is False
        assert is_valid_aadhaar("134123412341") is False

    def test_bad_checksum(self) -> None:
        assert is_valid_aadhaar("234123412347") is False


class TestPan:
    """Tests for PAN layout validation."""

    def test_valid(self) -> None:
        assert is_valid_pan("ABCDE1234F") is True

    def test_lowercase_and_spaces_normalized(self) -> None:
        assert is_valid_pan("abcde 1234f") is True

    def test_invalid_layouts(self) -> None:
        assert is_valid_pan("ABCD12345F") is False
        assert is_valid_pan("ABCDE1234") is False
        assert is_valid_pan("") is False


class TestCardNumber:
    """Tests for payment card number validation."""

    def test_valid_with_separators(self) -> None:
        assert is_valid_card_number("4111 1111 1111 1111") is True
        assert is_valid_card_number("4111-1111-1111-1111") is True

    def test_length_limits(self) -> None:
        assert is_valid_card_number("411111111111") is False
        assert is_valid_card_number("4" * 20) is False

    def test_bad_luhn(self) -> None:
        assert is_valid_card_number("4111111111111112") is False


class TestPassportNumber:
    """Tests for passport number validation."""

    def test_valid(self) -> None:
        assert is_valid_passport_number("K1234567") is True
        assert is_valid_passport_number("l898902c3") is True

    def test_invalid(self) -> None:
        assert is_valid_passport_number("K123") is False
        assert is_valid_passport_number("K1234567890") is False
        assert is_valid_passport_number("K12-4567") is False


class TestExpiryDate:
    """Tests for card expiry validation."""

    def test_valid_until_end_of_month(self) -> None:
        assert is_valid_expiry_date("12/25", today=date(2025, 12, 15)) is True

    def test_last_day_of_month_is_expired(self) -> None:
        assert is_valid_expiry_date("12/25", today=date(2025, 12, 31)) is False

    def test_four_digit_year(self) -> None:
        assert is_valid_expiry_date("01/2030", today=date(2025, 6, 1)) is True

    def test_compact_form(self) -> None:
        assert is_valid_expiry_date("0630", today=date(2025, 6, 1)) is True

    def test_past_date(self) -> None:
        assert is_valid_expiry_date("01/20", today=date(2025, 6, 1)) is False

    def test_malformed(self) -> None:
        assert is_valid_expiry_date("13/30") is False
        assert is_valid_expiry_date("00/30") is False
        assert is_valid_expiry_date("ab/cd") is False
        assert is_valid_expiry_date("1/2") is False
        assert is_valid_expiry_date("12/1999") is False


class TestCardBrand:
    """Tests for card brand detection."""

    @pytest.mark.parametrize(
        ("number", "brand"),
        [
            ("4111111111111111", "Visa"),
            ("5555555555554444", "Mastercard"),
            ("2221000000000009", "Mastercard"),
            ("378282246310005", "American Express"),
            ("6076820000000000", "RuPay"),
            ("6521000000000000", "RuPay"),
            ("6500000000000002", "Discover"),
            ("6445000000000000", "Discover"),
            ("3530111333300000", "JCB"),
            ("30569309025904", "Diners Club"),
            ("9999999999999999", "Unknown"),
        ],
    )
    def test_brand(self, number: str, brand: str) -> None:
        assert get_card_brand(number) == brand

    def test_short_or_invalid_input(self) -> None:
        assert get_card_brand("411") == "Unknown"
        assert get_card_brand("abcd1234") == "Unknown"

    def test_separators_ignored(self) -> None:
        assert get_card_brand("4111 1111 1111 1111") == "Visa"


class TestMrz:
    """Tests for MRZ helpers."""

    def test_check_digits_of_specimen(self) -> None:
        assert mrz_check_digit("L898902C3") == 6
        assert mrz_check_digit("740812") == 2
        assert mrz_check_digit("120415") == 9
        assert mrz_check_digit("ZE184226B<<<<<") == 1

    def test_invalid_characters(self) -> None:
        assert mrz_check_digit("abc") is None
        assert is_valid_mrz_field("abc", "0") is False

    def test_filler_check_digit(self) -> None:
        assert is_valid_mrz_field("<<<<<<", "<") is True
        assert is_valid_mrz_field("AB<<<<", "<") is False

    def test_field_validation(self) -> None:
        assert is_valid_mrz_field("L898902C3", "6") is True
        assert is_valid_mrz_field("L898902C3", "7") is False

    def test_mrz_line_heuristic(
        self, mrz_lines: tuple[str, str]
    ) -> None:
        assert is_mrz_line(mrz_lines[0]) is True
        assert is_mrz_line(mrz_lines[1]) is True
        assert is_mrz_line("REPUBLIC OF UTOPIA PASSPORT") is False
        assert is_mrz_line("P<UTO") is False


class TestStripSeparators:
    """Tests for separator stripping."""

    def test_strips_spaces_and_hyphens(self) -> None:
        assert strip_separators("2341 2341-2346") == "234123412346"


class TestMasking:
    """Tests for identifier masking."""

    def test_card_number(self) -> None:
        assert mask_card_number("4111111111111111") == "4111 ******** 1111"
        assert mask_card_number("4111 1111 1111 1111") == "4111 ******** 1111"

    def test_card_number_amex(self) -> None:
        assert mask_card_number("378282246310005") == "3782 ******* 0005"

    def test_card_number_short(self) -> None:
        assert mask_card_number("1234567") == "*******"
        assert mask_card_number("") == ""

    def test_aadhaar(self) -> None:
        assert mask_aadhaar_number("234123412346") == "XXXX-XXXX-2346"
        assert mask_aadhaar_number("2341 2341 2346") == "XXXX-XXXX-2346"

    def test_aadhaar_wrong_length(self) -> None:
        assert mask_aadhaar_number("12345") == "XXXXX"

    def test_pan(self) -> None:
        assert mask_pan_number("ABCDE1234F") == "XXXXX1234X"
        assert mask_pan_number("abcde1234f") == "XXXXX1234X"

    def test_pan_wrong_length(self) -> None:
        assert mask_pan_number("ABC") == "XXX"

    def test_mask_digits_in_text(self) -> None:
        assert mask_digits("Aadhaar 2341 2341 2346 found") == (
            "Aadhaar **** **** 2346 found"
        )
        assert mask_digits("card 4111111111111111") == "card ************1111"

    def test_mask_digits_leaves_short_numbers(self) -> None:
        assert mask_digits("Age 35, pin 1234567") == "Age 35, pin 1234567"
