"""Input validation utilities for addresses and other user inputs."""

import re
from dataclasses import dataclass
from typing import Any

from eth_utils import is_address, to_checksum_address


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


HEX_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class AddressValidator:
    @staticmethod
    def validate(value: str | None) -> ValidationResult:
        if value is None or not value.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Address is required",
            )

        candidate = value.strip()

        if not HEX_ADDRESS_PATTERN.match(candidate):
            return ValidationResult(
                is_valid=False,
                error_message="Address must be 0x followed by 40 hex characters",
            )

        # mixed case must be a valid EIP-55 checksum
        if not is_address(candidate):
            return ValidationResult(
                is_valid=False,
                error_message="Address checksum is invalid",
            )

        return ValidationResult(
            is_valid=True,
            normalized_value=to_checksum_address(candidate),
        )


def is_address_empty(address: str | None) -> bool:
    return address is None or not address.strip()


def is_address_valid(address: str | None) -> bool:
    return AddressValidator.validate(address).is_valid


def addresses_equal(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()
