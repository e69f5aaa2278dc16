"""Best-effort step telemetry for naming operations.

Each completed on-chain step is posted as one flat record. Delivery failures
are logged and dropped; they never affect the naming operation.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from enscribe.shared.config import NamingConfig
from enscribe.shared.network import NetworkClient, RetryConfig

logger = logging.getLogger(__name__)

STEP_SUBNAME = "subname::setSubnodeRecord"
STEP_FORWARD = "fwdres::setAddr"
STEP_REVERSE_SET_NAME = "revres::setName"
STEP_REVERSE_SET_NAME_FOR_ADDR = "revres::setNameForAddr"


@dataclass(frozen=True)
class StepEvent:
    correlation_id: str
    timestamp: float
    chain_id: int
    contract_address: str
    sender_address: str
    name: str
    step: str
    tx_hash: str
    contract_type: str
    op_type: str

    def to_payload(self, source: str) -> dict[str, Any]:
        return {
            "co_id": self.correlation_id,
            "contract_address": self.contract_address,
            "ens_name": self.name,
            "deployer_address": self.sender_address,
            "network": self.chain_id,
            "timestamp": int(self.timestamp),
            "step": self.step,
            "txn_hash": self.tx_hash,
            "contract_type": self.contract_type,
            "op_type": self.op_type,
            "source": source,
        }


class TelemetryClient:
    def __init__(
        self,
        config: NamingConfig | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.config = config or NamingConfig()
        self.network_client = network_client or NetworkClient(
            retry_config=RetryConfig(max_retries=1)
        )

    def log_step(self, event: StepEvent) -> bool:
        try:
            self.network_client.post(
                self.config.metrics_url,
                context="Post naming metric",
                json=event.to_payload(self.config.source),
                headers={"Content-Type": "application/json"},
            )
            return True
        except Exception as e:
            logger.warning("Failed to deliver telemetry for %s: %s", event.step, e)
            return False


class StepReporter:
    """Per-request telemetry binding shared by every step of one naming request."""

    def __init__(
        self,
        correlation_id: str,
        op_type: str,
        enabled: bool = False,
        client: TelemetryClient | None = None,
    ):
        self.correlation_id = correlation_id
        self.op_type = op_type
        self.enabled = enabled
        self.client = client
        self.events: list[StepEvent] = []

    def record(
        self,
        step: str,
        tx_hash: str,
        chain_id: int,
        sender_address: str,
        contract_address: str,
        name: str,
        contract_type: str,
    ) -> None:
        event = StepEvent(
            correlation_id=self.correlation_id,
            timestamp=time.time(),
            chain_id=chain_id,
            contract_address=contract_address,
            sender_address=sender_address,
            name=name,
            step=step,
            tx_hash=tx_hash,
            contract_type=contract_type,
            op_type=self.op_type,
        )
        self.events.append(event)
        if self.enabled and self.client is not None:
            self.client.log_step(event)
