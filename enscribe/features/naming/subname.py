"""Idempotent subname creation under a wrapped or unwrapped parent."""

from __future__ import annotations

import logging

from enscribe.features.naming.abi import ENS_REGISTRY_ABI, NAME_WRAPPER_ABI
from enscribe.features.naming.ens import labelhash, namehash
from enscribe.features.naming.models import ContractType, OperationResult, SkipReason
from enscribe.features.naming.validators import parse_normalized_name
from enscribe.networks import NetworkContractSet
from enscribe.shared.protocols import ChainClientProtocol
from enscribe.shared.telemetry import STEP_SUBNAME, StepReporter

logger = logging.getLogger(__name__)

DEFAULT_TTL = 0
DEFAULT_FUSES = 0
DEFAULT_EXPIRY = 0


class SubnameRegistrar:
    def __init__(
        self,
        client: ChainClientProtocol,
        contracts: NetworkContractSet,
        reporter: StepReporter | None = None,
    ):
        self.client = client
        self.contracts = contracts
        self.reporter = reporter

    def subname_exists(self, name: str) -> bool:
        return bool(
            self.client.read_contract(
                self.contracts.require("registry"),
                ENS_REGISTRY_ABI,
                "recordExists",
                [namehash(name)],
            )
        )

    def is_parent_wrapped(self, parent: str) -> bool:
        return bool(
            self.client.read_contract(
                self.contracts.require("wrapper"),
                NAME_WRAPPER_ABI,
                "isWrapped",
                [namehash(parent)],
            )
        )

    def ensure_subname(
        self,
        name: str,
        contract_address: str = "",
        contract_type: ContractType = ContractType.UNKNOWN,
    ) -> OperationResult:
        parsed = parse_normalized_name(name)

        if self.subname_exists(name):
            logger.info("%s already exists, skipping subname creation", name)
            return OperationResult.skipped(SkipReason.ALREADY_EXISTS)

        owner = self.client.account_address
        resolver = self.contracts.require("resolver")
        parent_node = namehash(parsed.parent)

        if self.is_parent_wrapped(parsed.parent):
            logger.info("Creating %s through the name wrapper", name)
            tx_hash = self.client.write_contract(
                self.contracts.require("wrapper"),
                NAME_WRAPPER_ABI,
                "setSubnodeRecord",
                [
                    parent_node,
                    parsed.label,
                    owner,
                    resolver,
                    DEFAULT_TTL,
                    DEFAULT_FUSES,
                    DEFAULT_EXPIRY,
                ],
            )
        else:
            logger.info("Creating %s through the registry", name)
            tx_hash = self.client.write_contract(
                self.contracts.require("registry"),
                ENS_REGISTRY_ABI,
                "setSubnodeRecord",
                [parent_node, labelhash(parsed.label), owner, resolver, DEFAULT_TTL],
            )

        self.client.wait_for_receipt(tx_hash)
        logger.info("Subname %s created: %s", name, tx_hash)

        if self.reporter is not None:
            self.reporter.record(
                STEP_SUBNAME,
                tx_hash,
                chain_id=self.client.chain_id,
                sender_address=owner,
                contract_address=contract_address,
                name=name,
                contract_type=contract_type.value,
            )

        return OperationResult.performed(tx_hash)
