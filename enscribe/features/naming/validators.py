"""Name parsing for contract naming."""

from enscribe.features.naming.errors import InvalidNameFormatError
from enscribe.features.naming.models import ParsedName
from enscribe.validation import (
    AddressValidator,
    ValidationResult,
    is_address_empty,
    is_address_valid,
)

NAME_SEPARATOR = "."


class NameParser:
    @staticmethod
    def validate(name: str | None) -> ValidationResult:
        if name is None or not name.strip():
            return ValidationResult(is_valid=False, error_message="Name is required")

        parts = name.split(NAME_SEPARATOR)
        if len(parts) < 2:
            return ValidationResult(
                is_valid=False,
                error_message="Invalid normalized name: must have at least one dot",
            )

        if any(not part for part in parts):
            return ValidationResult(
                is_valid=False,
                error_message="Invalid normalized name: labels must not be empty",
            )

        return ValidationResult(
            is_valid=True,
            normalized_value=ParsedName(
                label=parts[0], parent=NAME_SEPARATOR.join(parts[1:])
            ),
        )


def parse_normalized_name(name: str) -> ParsedName:
    result = NameParser.validate(name)
    if not result.is_valid:
        raise InvalidNameFormatError(result.error_message)
    return result.normalized_value


__all__ = [
    "AddressValidator",
    "NameParser",
    "is_address_empty",
    "is_address_valid",
    "parse_normalized_name",
]
