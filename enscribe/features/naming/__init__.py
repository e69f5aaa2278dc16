"""Contract naming feature module for Enscribe.

This module provides:
- Contract capability detection (Ownable / ReverseClaimer)
- Idempotent subname creation under wrapped or unwrapped parents
- Idempotent forward and reverse resolution, optionally mirrored to an L2
- The orchestrator that sequences these steps for one request
"""

from enscribe.features.naming.detector import (
    ContractTypeDetector,
    classify_contract,
    is_contract_owner,
    is_ownable,
    is_reverse_claimable,
)
from enscribe.features.naming.errors import (
    ChainCallError,
    InvalidInputError,
    InvalidNameFormatError,
    NamingError,
    NamingStepError,
    UnsupportedContractTypeError,
)
from enscribe.features.naming.forward import ForwardResolutionSetter
from enscribe.features.naming.models import (
    ContractType,
    NamingOutcome,
    NamingRequest,
    NamingStep,
    OperationResult,
    OperationStatus,
    ParsedName,
    SkipReason,
)
from enscribe.features.naming.reverse import ReverseResolutionSetter
from enscribe.features.naming.service import (
    NamingOrchestrator,
    NamingState,
    name_contract,
)
from enscribe.features.naming.subname import SubnameRegistrar
from enscribe.features.naming.validators import NameParser, parse_normalized_name

__all__ = [
    "ChainCallError",
    "ContractType",
    "ContractTypeDetector",
    "ForwardResolutionSetter",
    "InvalidInputError",
    "InvalidNameFormatError",
    "NameParser",
    "NamingError",
    "NamingOrchestrator",
    "NamingOutcome",
    "NamingRequest",
    "NamingState",
    "NamingStep",
    "NamingStepError",
    "OperationResult",
    "OperationStatus",
    "ParsedName",
    "ReverseResolutionSetter",
    "SkipReason",
    "SubnameRegistrar",
    "UnsupportedContractTypeError",
    "classify_contract",
    "is_contract_owner",
    "is_ownable",
    "is_reverse_claimable",
    "name_contract",
    "parse_normalized_name",
]
