"""Protocol definitions for the collaborators the naming core depends on."""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class ChainClientProtocol(Protocol):
    """Signing client bound to one account on one chain.

    ``function`` is either a plain function name or a full signature such as
    ``"addr(bytes32,uint256)"`` when the ABI overloads the name.

    Implementations raise ``ChainCallError`` for failed RPC calls, reverted
    transactions and receipt timeouts, including the ``chain_id`` lookup.
    """

    @property
    def account_address(self) -> str: ...

    @property
    def chain_id(self) -> int: ...

    def read_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function: str,
        args: Sequence[Any] = (),
    ) -> Any: ...

    def write_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function: str,
        args: Sequence[Any] = (),
    ) -> str: ...

    def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]: ...
