"""Enscribe - name smart contracts with ENS.

This package is organized into feature-based modules:
- features.naming: capability detection, subname creation, forward and
  reverse resolution, and the orchestrator that sequences them
- networks: per-network ENS contract tables
- chain: web3-backed signing client
- shared: logging, configuration, HTTP and telemetry
"""

from enscribe.features.naming import (
    ContractType,
    NamingOrchestrator,
    NamingOutcome,
    NamingRequest,
    is_contract_owner,
    is_ownable,
    is_reverse_claimable,
    name_contract,
)
from enscribe.networks import (
    NetworkContractSet,
    get_network_contracts,
    get_network_info,
)
from enscribe.validation import AddressValidator, ValidationResult, is_address_valid

__version__ = "0.1.0"
__all__ = [
    "AddressValidator",
    "ContractType",
    "NamingOrchestrator",
    "NamingOutcome",
    "NamingRequest",
    "NetworkContractSet",
    "ValidationResult",
    "get_network_contracts",
    "get_network_info",
    "is_address_valid",
    "is_contract_owner",
    "is_ownable",
    "is_reverse_claimable",
    "name_contract",
]
