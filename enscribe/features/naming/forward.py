"""Idempotent forward resolution (name -> address)."""

from __future__ import annotations

import logging
from typing import Any

from eth_utils import to_bytes

from enscribe.features.naming.abi import (
    ADDR,
    ADDR_FOR_COIN,
    PUBLIC_RESOLVER_ABI,
    SET_ADDR,
    SET_ADDR_FOR_COIN,
)
from enscribe.features.naming.ens import namehash
from enscribe.features.naming.models import ContractType, OperationResult, SkipReason
from enscribe.networks import NetworkContractSet
from enscribe.shared.protocols import ChainClientProtocol
from enscribe.shared.telemetry import STEP_FORWARD, StepReporter
from enscribe.validation import addresses_equal

logger = logging.getLogger(__name__)


def _as_hex(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex() if value else ""
    return str(value)


class ForwardResolutionSetter:
    def __init__(
        self,
        client: ChainClientProtocol,
        contracts: NetworkContractSet,
        reporter: StepReporter | None = None,
    ):
        self.client = client
        self.contracts = contracts
        self.reporter = reporter

    def get_forward_address(self, name: str, coin_type: int | None = None) -> str:
        resolver = self.contracts.require("resolver")
        node = namehash(name)
        if coin_type is None:
            value = self.client.read_contract(resolver, PUBLIC_RESOLVER_ABI, ADDR, [node])
        else:
            value = self.client.read_contract(
                resolver, PUBLIC_RESOLVER_ABI, ADDR_FOR_COIN, [node, coin_type]
            )
        return _as_hex(value)

    def set_forward_resolution(
        self,
        name: str,
        address: str,
        coin_type: int | None = None,
        contract_type: ContractType = ContractType.UNKNOWN,
    ) -> OperationResult:
        current = self.get_forward_address(name, coin_type)
        if addresses_equal(current, address):
            logger.info(
                "Forward resolution for %s already set (coin type %s)", name, coin_type
            )
            return OperationResult.skipped(SkipReason.ALREADY_SET)

        resolver = self.contracts.require("resolver")
        node = namehash(name)
        if coin_type is None:
            tx_hash = self.client.write_contract(
                resolver, PUBLIC_RESOLVER_ABI, SET_ADDR, [node, address]
            )
        else:
            tx_hash = self.client.write_contract(
                resolver,
                PUBLIC_RESOLVER_ABI,
                SET_ADDR_FOR_COIN,
                [node, coin_type, to_bytes(hexstr=address)],
            )

        self.client.wait_for_receipt(tx_hash)
        logger.info("Forward resolution %s -> %s set: %s", name, address, tx_hash)

        if self.reporter is not None:
            self.reporter.record(
                STEP_FORWARD,
                tx_hash,
                chain_id=self.client.chain_id,
                sender_address=self.client.account_address,
                contract_address=address,
                name=name,
                contract_type=contract_type.value,
            )

        return OperationResult.performed(tx_hash)
