"""Tests for address validation."""

import pytest

from enscribe.validation import (
    AddressValidator,
    addresses_equal,
    is_address_empty,
    is_address_valid,
)

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestAddressValidator:
    def test_valid_checksummed_address(self):
        result = AddressValidator.validate(CHECKSUMMED)
        assert result.is_valid
        assert result.error_message is None
        assert result.normalized_value == CHECKSUMMED

    def test_lowercase_address_is_normalized_to_checksum(self):
        result = AddressValidator.validate(CHECKSUMMED.lower())
        assert result.is_valid
        assert result.normalized_value == CHECKSUMMED

    def test_surrounding_whitespace_ignored(self):
        assert AddressValidator.validate(f"  {CHECKSUMMED}  ").is_valid

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        result = AddressValidator.validate(value)
        assert not result.is_valid
        assert result.error_message == "Address is required"

    @pytest.mark.parametrize(
        "value",
        [
            "5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAe",
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAedd",
            "0xZZAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        ],
    )
    def test_malformed(self, value):
        result = AddressValidator.validate(value)
        assert not result.is_valid
        assert result.error_message == "Address must be 0x followed by 40 hex characters"

    def test_bad_checksum(self):
        result = AddressValidator.validate("0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
        assert not result.is_valid
        assert result.error_message == "Address checksum is invalid"


class TestHelpers:
    def test_is_address_empty(self):
        assert is_address_empty(None)
        assert is_address_empty(" ")
        assert not is_address_empty(CHECKSUMMED)

    def test_is_address_valid(self):
        assert is_address_valid(CHECKSUMMED)
        assert not is_address_valid("0x1234")

    def test_addresses_equal_ignores_case(self):
        assert addresses_equal(CHECKSUMMED, CHECKSUMMED.lower())
        assert addresses_equal(CHECKSUMMED.upper().replace("0X", "0x"), CHECKSUMMED)

    def test_addresses_equal_empty_never_matches(self):
        assert not addresses_equal("", "")
        assert not addresses_equal(None, CHECKSUMMED)
