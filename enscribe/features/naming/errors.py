"""Exceptions raised while naming a contract."""

from __future__ import annotations


class NamingError(Exception):
    """Base class for every naming failure."""


class InvalidInputError(NamingError, ValueError):
    pass


class InvalidNameFormatError(InvalidInputError):
    pass


class UnsupportedContractTypeError(NamingError):
    def __init__(self, contract_type: object = None):
        self.contract_type = contract_type
        super().__init__(
            "Only Ownable, ERC173 and ReverseClaimer contracts can be named "
            f"(detected: {getattr(contract_type, 'value', contract_type)})"
        )


class ChainCallError(NamingError):
    """A contract read or write failed: revert, RPC error or failed receipt."""

    def __init__(
        self,
        message: str,
        function: str | None = None,
        address: str | None = None,
        tx_hash: str | None = None,
    ):
        self.function = function
        self.address = address
        self.tx_hash = tx_hash
        super().__init__(message)


class NamingStepError(NamingError):
    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Step '{step}' failed: {cause}")
