"""Ownership-gated reverse resolution (address -> name)."""

from __future__ import annotations

import logging

from enscribe.features.naming.abi import (
    L2_REVERSE_REGISTRAR_ABI,
    PUBLIC_RESOLVER_ABI,
    REVERSE_REGISTRAR_ABI,
)
from enscribe.features.naming.detector import is_contract_owner, read_contract_owner
from enscribe.features.naming.ens import reverse_node
from enscribe.features.naming.errors import UnsupportedContractTypeError
from enscribe.features.naming.models import ContractType, OperationResult, SkipReason
from enscribe.networks import NetworkContractSet
from enscribe.shared.protocols import ChainClientProtocol
from enscribe.shared.telemetry import (
    STEP_REVERSE_SET_NAME,
    STEP_REVERSE_SET_NAME_FOR_ADDR,
    StepReporter,
)
from enscribe.validation import addresses_equal

logger = logging.getLogger(__name__)


class ReverseResolutionSetter:
    def __init__(
        self,
        client: ChainClientProtocol,
        contracts: NetworkContractSet,
        reporter: StepReporter | None = None,
    ):
        self.client = client
        self.contracts = contracts
        self.reporter = reporter

    def set_reverse_resolution(
        self, name: str, address: str, contract_type: ContractType
    ) -> OperationResult:
        # An Unknown contract can never pass the ownership check below, so it
        # is rejected first.
        if contract_type is ContractType.UNKNOWN:
            raise UnsupportedContractTypeError(contract_type)

        if not is_contract_owner(address, self.client, self.contracts.require("registry")):
            logger.info("Not the owner of %s, skipping reverse resolution", address)
            return OperationResult.skipped(SkipReason.NOT_OWNER)

        if contract_type is ContractType.REVERSE_CLAIMER:
            step = STEP_REVERSE_SET_NAME
            tx_hash = self.client.write_contract(
                self.contracts.require("resolver"),
                PUBLIC_RESOLVER_ABI,
                "setName",
                [reverse_node(address), name],
            )
        elif contract_type is ContractType.OWNABLE:
            step = STEP_REVERSE_SET_NAME_FOR_ADDR
            tx_hash = self.client.write_contract(
                self.contracts.require("reverse_registrar"),
                REVERSE_REGISTRAR_ABI,
                "setNameForAddr",
                [
                    address,
                    self.client.account_address,
                    self.contracts.require("resolver"),
                    name,
                ],
            )
        else:
            raise UnsupportedContractTypeError(contract_type)

        self.client.wait_for_receipt(tx_hash)
        logger.info("Reverse resolution %s -> %s set: %s", address, name, tx_hash)
        self._report(step, tx_hash, name, address, contract_type)
        return OperationResult.performed(tx_hash)

    def set_secondary_reverse_resolution(
        self,
        name: str,
        address: str,
        contract_type: ContractType = ContractType.UNKNOWN,
    ) -> OperationResult:
        """Reverse record on a secondary network through its L2 reverse registrar.

        Only Ownable contracts are supported there, so a failing ``owner()``
        read propagates to the caller.
        """
        owner = read_contract_owner(self.client, address)
        if not addresses_equal(owner, self.client.account_address):
            logger.info(
                "Not the owner of %s on chain %s, skipping reverse resolution",
                address,
                self.client.chain_id,
            )
            return OperationResult.skipped(SkipReason.NOT_OWNER)

        tx_hash = self.client.write_contract(
            self.contracts.require("l2_reverse_registrar"),
            L2_REVERSE_REGISTRAR_ABI,
            "setNameForAddr",
            [address, name],
        )
        self.client.wait_for_receipt(tx_hash)
        logger.info(
            "Reverse resolution %s -> %s set on chain %s: %s",
            address,
            name,
            self.client.chain_id,
            tx_hash,
        )
        self._report(STEP_REVERSE_SET_NAME_FOR_ADDR, tx_hash, name, address, contract_type)
        return OperationResult.performed(tx_hash)

    def _report(
        self,
        step: str,
        tx_hash: str,
        name: str,
        address: str,
        contract_type: ContractType,
    ) -> None:
        if self.reporter is None:
            return
        self.reporter.record(
            step,
            tx_hash,
            chain_id=self.client.chain_id,
            sender_address=self.client.account_address,
            contract_address=address,
            name=name,
            contract_type=contract_type.value,
        )
