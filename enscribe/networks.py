"""Per-network ENS contract tables.

Primary (L1) networks carry the registry, public resolver, name wrapper and
reverse registrar. Secondary (L2) networks carry the coin type used for their
multi-coin address record on L1 and, when deployed, their own reverse
registrar. Tables can be extended from a JSON file with
``load_network_contracts``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENSIP11_EVM_FLAG = 0x80000000
ETHEREUM_COIN_TYPE = 60


def evm_coin_type(chain_id: int) -> int:
    if chain_id == 1:
        return ETHEREUM_COIN_TYPE
    return (ENSIP11_EVM_FLAG | chain_id) & 0xFFFFFFFF


@dataclass(frozen=True)
class NetworkContractSet:
    registry: str | None = None
    resolver: str | None = None
    wrapper: str | None = None
    reverse_registrar: str | None = None
    l2_reverse_registrar: str | None = None
    coin_type: int | None = None

    @property
    def is_primary(self) -> bool:
        return bool(
            self.registry and self.resolver and self.wrapper and self.reverse_registrar
        )

    def require(self, role: str) -> str:
        value = getattr(self, role, None)
        if not value:
            raise ValueError(f"Contract address for '{role}' is not configured")
        return value

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkContractSet":
        aliases = {
            "ENS_REGISTRY": "registry",
            "PUBLIC_RESOLVER": "resolver",
            "NAME_WRAPPER": "wrapper",
            "REVERSE_REGISTRAR": "reverse_registrar",
            "L2_REVERSE_REGISTRAR": "l2_reverse_registrar",
            "COIN_TYPE": "coin_type",
        }
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            field_name = aliases.get(key, key)
            if field_name not in known:
                logger.warning("Ignoring unknown contract role: %s", key)
                continue
            values[field_name] = value
        if values.get("coin_type") is not None:
            values["coin_type"] = int(values["coin_type"])
        return cls(**values)


ENS_REGISTRY = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"

NETWORK_CONTRACTS: dict[str, NetworkContractSet] = {
    "mainnet": NetworkContractSet(
        registry=ENS_REGISTRY,
        resolver="0x231b0Ee14048e9dCcD1d247744d114a4EB5E8E63",
        wrapper="0xD4416b13d2b3a9aBae7AcD5D6C2BbDBE25686401",
        reverse_registrar="0xa58E81fe9b61B5c3fE2AFD33CF304c454AbFc7Cb",
        coin_type=ETHEREUM_COIN_TYPE,
    ),
    "sepolia": NetworkContractSet(
        registry=ENS_REGISTRY,
        resolver="0x8FADE66B79cC9f707aB26799354482EB93a5B7dD",
        wrapper="0x0635513f179D50A207757E05759CbD106d7dFcE8",
        reverse_registrar="0xA0a1AbcDAe1a2a4A2EF8e9113Ff0e02DD81DC0C6",
        coin_type=ETHEREUM_COIN_TYPE,
    ),
    "base": NetworkContractSet(coin_type=evm_coin_type(8453)),
    "base-sepolia": NetworkContractSet(coin_type=evm_coin_type(84532)),
    "optimism": NetworkContractSet(coin_type=evm_coin_type(10)),
    "optimism-sepolia": NetworkContractSet(coin_type=evm_coin_type(11155420)),
    "arbitrum": NetworkContractSet(coin_type=evm_coin_type(42161)),
    "arbitrum-sepolia": NetworkContractSet(coin_type=evm_coin_type(421614)),
    "linea": NetworkContractSet(coin_type=evm_coin_type(59144)),
    "linea-sepolia": NetworkContractSet(coin_type=evm_coin_type(59141)),
    "scroll": NetworkContractSet(coin_type=evm_coin_type(534352)),
    "scroll-sepolia": NetworkContractSet(coin_type=evm_coin_type(534351)),
}

CHAIN_ID_TO_NETWORK: dict[int, str] = {
    1: "mainnet",
    11155111: "sepolia",
    8453: "base",
    84532: "base-sepolia",
    10: "optimism",
    11155420: "optimism-sepolia",
    42161: "arbitrum",
    421614: "arbitrum-sepolia",
    59144: "linea",
    59141: "linea-sepolia",
    534352: "scroll",
    534351: "scroll-sepolia",
}


class UnknownNetworkError(KeyError):
    def __str__(self) -> str:
        return f"No ENS contracts configured for network {self.args[0]!r}"


def get_network_name(chain_id: int) -> str:
    try:
        return CHAIN_ID_TO_NETWORK[chain_id]
    except KeyError:
        raise UnknownNetworkError(chain_id) from None


def get_network_contracts(network: str) -> NetworkContractSet:
    try:
        return NETWORK_CONTRACTS[network]
    except KeyError:
        raise UnknownNetworkError(network) from None


def get_network_info(chain_id: int) -> dict[str, Any]:
    name = get_network_name(chain_id)
    return {
        "chain_id": chain_id,
        "name": name,
        "contracts": get_network_contracts(name),
    }


def load_network_contracts(path: str | Path) -> dict[str, NetworkContractSet]:
    """Merge network tables from a JSON file into the built-in tables.

    The file maps network names to contract roles, optionally with a
    ``chain_id`` per network::

        {"base": {"chain_id": 8453, "l2_reverse_registrar": "0x..."}}

    Entries for an existing network update only the roles they name.
    """
    with open(path, "r") as f:
        data = json.load(f)

    loaded: dict[str, NetworkContractSet] = {}
    for network, roles in data.items():
        roles = dict(roles)
        chain_id = roles.pop("chain_id", None)
        overrides = NetworkContractSet.from_dict(roles)
        existing = NETWORK_CONTRACTS.get(network)
        if existing is not None:
            changed = {
                key: value
                for key, value in overrides.to_dict().items()
                if value is not None
            }
            contracts = replace(existing, **changed)
        else:
            contracts = overrides
        if chain_id is not None:
            CHAIN_ID_TO_NETWORK[int(chain_id)] = network
            if contracts.coin_type is None:
                contracts = replace(contracts, coin_type=evm_coin_type(int(chain_id)))
        NETWORK_CONTRACTS[network] = contracts
        loaded[network] = contracts
        logger.info("Loaded ENS contracts for %s", network)

    return loaded
