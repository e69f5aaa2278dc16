"""Contract capability detection.

A contract is classified by trial reads: an ``owner()`` call on the contract
itself (Ownable / ERC-173) and a lookup of the owner of its reverse node in
the registry (ReverseClaimer). A read that raises counts as "capability
absent"; a missing entry point cannot be told apart from a transient RPC
error.
"""

from __future__ import annotations

import logging

from enscribe.features.naming.abi import ENS_REGISTRY_ABI, OWNABLE_ABI
from enscribe.features.naming.ens import reverse_node
from enscribe.features.naming.models import ContractType
from enscribe.networks import NetworkContractSet
from enscribe.shared.protocols import ChainClientProtocol
from enscribe.validation import addresses_equal, is_address_valid

logger = logging.getLogger(__name__)


def read_contract_owner(client: ChainClientProtocol, address: str) -> str:
    return client.read_contract(address, OWNABLE_ABI, "owner")


def read_reverse_record_owner(
    client: ChainClientProtocol, address: str, registry: str
) -> str:
    return client.read_contract(
        registry, ENS_REGISTRY_ABI, "owner", [reverse_node(address)]
    )


def is_ownable(address: str, client: ChainClientProtocol) -> bool:
    if not is_address_valid(address):
        return False

    try:
        read_contract_owner(client, address)
    except Exception as e:
        logger.debug("owner() probe failed for %s: %s", address, e)
        return False

    logger.debug("Contract %s implements Ownable", address)
    return True


def is_reverse_claimable(
    address: str, client: ChainClientProtocol, registry: str
) -> bool:
    if not is_address_valid(address):
        return False

    try:
        reverse_owner = read_reverse_record_owner(client, address, registry)
    except Exception as e:
        logger.debug("Reverse record probe failed for %s: %s", address, e)
        return False

    claimable = addresses_equal(reverse_owner, client.account_address)
    logger.debug(
        "Reverse record owner of %s is %s (claimable=%s)",
        address,
        reverse_owner,
        claimable,
    )
    return claimable


def is_contract_owner(address: str, client: ChainClientProtocol, registry: str) -> bool:
    """True when the client's account owns ``address``.

    Ownership is read from the contract's ``owner()``; if that call raises,
    the owner of the contract's reverse record in the registry is used
    instead. Errors from the fallback read propagate.
    """
    if not is_address_valid(address):
        return False

    try:
        owner = read_contract_owner(client, address)
    except Exception:
        owner = read_reverse_record_owner(client, address, registry)

    return addresses_equal(owner, client.account_address)


def classify_contract(reverse_claimer: bool, ownable: bool) -> ContractType:
    # ReverseClaimer wins when both probes succeed.
    if reverse_claimer:
        return ContractType.REVERSE_CLAIMER
    if ownable:
        return ContractType.OWNABLE
    return ContractType.UNKNOWN


class ContractTypeDetector:
    def __init__(self, client: ChainClientProtocol, contracts: NetworkContractSet):
        self.client = client
        self.contracts = contracts

    def detect_contract_type(self, address: str) -> ContractType:
        registry = self.contracts.require("registry")
        contract_type = classify_contract(
            reverse_claimer=is_reverse_claimable(address, self.client, registry),
            ownable=is_ownable(address, self.client),
        )
        logger.info("Contract %s classified as %s", address, contract_type.value)
        return contract_type
