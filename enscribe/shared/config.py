"""Runtime configuration for Enscribe."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_OP_TYPE = "enscribe-nameexisting"
DEFAULT_METRICS_URL = "https://app.enscribe.xyz/api/v1/metrics"
DEFAULT_EXPLORER_URL = "https://app.enscribe.xyz/explore"
DEFAULT_SOURCE = "enscribe"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class NamingConfig:
    """Defaults applied to every naming request that does not override them."""

    op_type: str = DEFAULT_OP_TYPE
    enable_telemetry: bool = False
    metrics_url: str = DEFAULT_METRICS_URL
    explorer_url: str = DEFAULT_EXPLORER_URL
    source: str = DEFAULT_SOURCE

    @classmethod
    def from_environment(cls) -> "NamingConfig":
        return cls(
            op_type=os.getenv("ENSCRIBE_OP_TYPE", DEFAULT_OP_TYPE),
            enable_telemetry=_env_flag("ENSCRIBE_ENABLE_METRICS"),
            metrics_url=os.getenv("ENSCRIBE_METRICS_URL", DEFAULT_METRICS_URL),
            explorer_url=os.getenv("ENSCRIBE_EXPLORER_URL", DEFAULT_EXPLORER_URL),
        )

    def build_explorer_url(self, chain_id: int, name: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/{chain_id}/{name}"


@dataclass(frozen=True)
class ClientConfig:
    rpc_url: str | None = None
    private_key: str | None = None
    network: str | None = None
    l2_rpc_url: str | None = None
    l2_private_key: str | None = None
    l2_network: str | None = None
    receipt_timeout: float = 180.0
    contracts_file: str | None = None

    @classmethod
    def from_environment(cls) -> "ClientConfig":
        timeout = os.getenv("ENSCRIBE_RECEIPT_TIMEOUT", "180")
        try:
            receipt_timeout = float(timeout)
        except ValueError:
            receipt_timeout = 180.0

        private_key = os.getenv("ENSCRIBE_PRIVATE_KEY")
        return cls(
            rpc_url=os.getenv("ENSCRIBE_RPC_URL"),
            private_key=private_key,
            network=os.getenv("ENSCRIBE_NETWORK"),
            l2_rpc_url=os.getenv("ENSCRIBE_L2_RPC_URL"),
            l2_private_key=os.getenv("ENSCRIBE_L2_PRIVATE_KEY") or private_key,
            l2_network=os.getenv("ENSCRIBE_L2_NETWORK"),
            receipt_timeout=receipt_timeout,
            contracts_file=os.getenv("ENSCRIBE_CONTRACTS_FILE"),
        )

    @property
    def has_secondary(self) -> bool:
        return bool(self.l2_rpc_url and self.l2_private_key)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(rpc_url={self.rpc_url!r}, network={self.network!r}, "
            f"l2_rpc_url={self.l2_rpc_url!r}, l2_network={self.l2_network!r}, "
            f"receipt_timeout={self.receipt_timeout!r})"
        )
