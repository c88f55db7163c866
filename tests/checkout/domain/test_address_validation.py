"""Tests for shipping address field rules."""

import pytest

from common.exceptions import AddressValidationError
from modules.checkout.validation import address_errors, is_valid_address, validate_address
from tests.fakes import VALID_ADDRESS


def _with(**changes):
    values = dict(VALID_ADDRESS)
    values.update(changes)
    return values


class TestAddressRules:
    def test_valid_address(self):
        assert address_errors(VALID_ADDRESS) == {}
        assert is_valid_address(VALID_ADDRESS)

    @pytest.mark.parametrize("field, message", [
        ("city", "City cannot be empty!"),
        ("first_name", "First name cannot be empty!"),
        ("last_name", "Last name cannot be empty!"),
        ("postal_code", "Postal code cannot be empty!"),
        ("street", "Street cannot be empty!"),
        ("phone_number", "Phone number cannot be empty!"),
        ("country", "Country cannot be empty!"),
    ])
    def test_required_fields(self, field, message):
        assert address_errors(_with(**{field: "  "})) == {field: [message]}

    def test_missing_field_counts_as_empty(self):
        values = dict(VALID_ADDRESS)
        values.pop("city")
        assert address_errors(values) == {"city": ["City cannot be empty!"]}

    def test_short_names(self):
        errors = address_errors(_with(first_name="A", last_name="B"))
        assert errors["first_name"] == ["First name should be 2 characters long minimum"]
        assert errors["last_name"] == ["Last name should be 2 characters long minimum"]

    @pytest.mark.parametrize("phone", ["12345678", "1234567890", "12345678a", "+48123456"])
    def test_phone_must_be_nine_digits(self, phone):
        assert address_errors(_with(phone_number=phone)) == {
            "phone_number": ["Phone number must be a 9-digit number"],
        }

    def test_unsupported_country(self):
        assert address_errors(_with(country="Atlantis")) == {
            "country": ["Please select a supported country"],
        }

    def test_optional_lines_may_be_blank(self):
        assert is_valid_address(_with(address_line1="", address_line2=""))


class TestValidateAddress:
    def test_returns_stripped_values(self):
        cleaned = validate_address(_with(city="  Warsaw "))
        assert cleaned["city"] == "Warsaw"

    def test_raises_with_field_errors(self):
        with pytest.raises(AddressValidationError) as exc_info:
            validate_address(_with(city="", phone_number="1"))
        assert set(exc_info.value.errors) == {"city", "phone_number"}
