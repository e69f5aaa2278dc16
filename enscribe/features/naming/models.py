"""Data model shared by the naming steps and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from enscribe.features.naming.errors import NamingStepError

if TYPE_CHECKING:
    from enscribe.networks import NetworkContractSet
    from enscribe.shared.protocols import ChainClientProtocol


class ContractType(str, Enum):
    OWNABLE = "Ownable"
    REVERSE_CLAIMER = "ReverseClaimer"
    UNKNOWN = "Unknown"


class OperationStatus(str, Enum):
    PERFORMED = "performed"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    ALREADY_EXISTS = "already_exists"
    ALREADY_SET = "already_set"
    NOT_OWNER = "not_owner"
    SECONDARY_UNAVAILABLE = "secondary_unavailable"


class NamingStep(str, Enum):
    SUBNAME = "subname"
    FORWARD_RESOLUTION = "forwardResolution"
    REVERSE_RESOLUTION = "reverseResolution"
    L2_FORWARD_RESOLUTION = "l2ForwardResolution"
    L2_REVERSE_RESOLUTION = "l2ReverseResolution"


@dataclass(frozen=True)
class ParsedName:
    label: str
    parent: str


@dataclass(frozen=True)
class OperationResult:
    status: OperationStatus
    tx_hash: str | None = None
    reason: SkipReason | None = None
    error: BaseException | None = None

    @classmethod
    def performed(cls, tx_hash: str) -> "OperationResult":
        return cls(status=OperationStatus.PERFORMED, tx_hash=tx_hash)

    @classmethod
    def skipped(cls, reason: SkipReason) -> "OperationResult":
        return cls(status=OperationStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, error: BaseException) -> "OperationResult":
        return cls(status=OperationStatus.FAILED, error=error)

    @property
    def is_performed(self) -> bool:
        return self.status is OperationStatus.PERFORMED

    @property
    def is_skipped(self) -> bool:
        return self.status is OperationStatus.SKIPPED

    @property
    def is_failed(self) -> bool:
        return self.status is OperationStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "tx_hash": self.tx_hash,
            "reason": self.reason.value if self.reason else None,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class NamingRequest:
    name: str
    contract_address: str
    primary_client: "ChainClientProtocol"
    primary_contracts: "NetworkContractSet | None" = None
    secondary_client: "ChainClientProtocol | None" = None
    secondary_contracts: "NetworkContractSet | None" = None
    correlation_id: str | None = None
    op_type: str | None = None
    enable_telemetry: bool | None = None

    @property
    def has_secondary(self) -> bool:
        return self.secondary_client is not None


@dataclass(frozen=True)
class NamingOutcome:
    success: bool
    name: str
    contract_address: str
    contract_type: ContractType
    explorer_url: str
    transactions: Mapping[str, str] = field(default_factory=dict)
    results: Mapping[str, OperationResult] = field(default_factory=dict)
    failed_step: str | None = None
    error: BaseException | None = None

    def __post_init__(self):
        object.__setattr__(self, "transactions", MappingProxyType(dict(self.transactions)))
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise NamingStepError(self.failed_step or "unknown", self.error) from self.error

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "name": self.name,
            "contractAddress": self.contract_address,
            "contractType": self.contract_type.value,
            "transactions": dict(self.transactions),
            "explorerUrl": self.explorer_url,
            "failedStep": self.failed_step,
            "error": str(self.error) if self.error else None,
        }
