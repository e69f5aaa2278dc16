from __future__ import annotations

import logging
from typing import Any, Sequence

from eth_account import Account
from eth_utils import is_hex_address, to_checksum_address
from web3 import Web3
from web3.exceptions import TimeExhausted

from enscribe.features.naming.errors import ChainCallError
from enscribe.shared.config import ClientConfig

logger = logging.getLogger(__name__)


class Web3ChainClient:
    DEFAULT_RECEIPT_TIMEOUT = 180.0
    DEFAULT_POLL_INTERVAL = 2.0

    def __init__(
        self,
        rpc_url: str | None,
        private_key: str,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        web3: Web3 | None = None,
    ):
        if web3 is None and not rpc_url:
            raise ValueError("An RPC URL is required")
        self.w3 = web3 or Web3(Web3.HTTPProvider(rpc_url))
        self.account = Account.from_key(private_key)
        self.receipt_timeout = receipt_timeout
        self._chain_id: int | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Web3ChainClient":
        if not config.private_key:
            raise ValueError("ENSCRIBE_PRIVATE_KEY is not set")
        return cls(config.rpc_url, config.private_key, config.receipt_timeout)

    @classmethod
    def secondary_from_config(cls, config: ClientConfig) -> "Web3ChainClient | None":
        if not config.has_secondary:
            return None
        return cls(config.l2_rpc_url, config.l2_private_key, config.receipt_timeout)

    @property
    def account_address(self) -> str:
        return self.account.address

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            try:
                self._chain_id = int(self.w3.eth.chain_id)
            except Exception as e:
                raise ChainCallError(f"Failed to read chain id: {e}") from e
        return self._chain_id

    @staticmethod
    def _prepare_args(args: Sequence[Any]) -> list[Any]:
        return [
            to_checksum_address(arg)
            if isinstance(arg, str) and is_hex_address(arg)
            else arg
            for arg in args
        ]

    def _function(
        self, address: str, abi: list[dict[str, Any]], function: str, args: Sequence[Any]
    ):
        contract = self.w3.eth.contract(address=to_checksum_address(address), abi=abi)
        if "(" in function:
            contract_function = contract.get_function_by_signature(function)
        else:
            contract_function = contract.get_function_by_name(function)
        return contract_function(*self._prepare_args(args))

    def read_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function: str,
        args: Sequence[Any] = (),
    ) -> Any:
        try:
            return self._function(address, abi, function, args).call()
        except Exception as e:
            raise ChainCallError(
                f"Call to {function} on {address} failed: {e}",
                function=function,
                address=address,
            ) from e

    def write_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function: str,
        args: Sequence[Any] = (),
    ) -> str:
        try:
            tx = self._function(address, abi, function, args).build_transaction(
                {
                    "from": self.account.address,
                    "nonce": self.w3.eth.get_transaction_count(
                        self.account.address, "pending"
                    ),
                    "chainId": self.chain_id,
                }
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise ChainCallError(
                f"Transaction {function} on {address} failed: {e}",
                function=function,
                address=address,
            ) from e

        tx_hex = self.w3.to_hex(tx_hash)
        logger.info("Transaction %s sent: %s", function, tx_hex)
        return tx_hex

    def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_latency=self.DEFAULT_POLL_INTERVAL,
            )
        except TimeExhausted as e:
            raise ChainCallError(
                f"Transaction not mined within {self.receipt_timeout} seconds: {tx_hash}",
                tx_hash=tx_hash,
            ) from e
        except Exception as e:
            raise ChainCallError(
                f"Failed to fetch receipt for {tx_hash}: {e}", tx_hash=tx_hash
            ) from e

        if receipt.get("status") != 1:
            raise ChainCallError(f"Transaction reverted: {tx_hash}", tx_hash=tx_hash)

        logger.info(
            "Transaction %s confirmed in block %s", tx_hash, receipt.get("blockNumber")
        )
        return dict(receipt)
