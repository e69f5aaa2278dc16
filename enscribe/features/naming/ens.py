"""ENS node hashing (EIP-137)."""

from __future__ import annotations

from eth_utils import keccak, to_bytes

EMPTY_NODE = b"\x00" * 32
REVERSE_SUFFIX = "addr.reverse"


def labelhash(label: str) -> bytes:
    return keccak(to_bytes(text=label))


def namehash(name: str) -> bytes:
    """ENS namehash for e.g. 'label.eth'. The empty name hashes to 32 zero bytes."""
    node = EMPTY_NODE
    if not name:
        return node
    labels = [label for label in name.split(".") if label]
    for label in reversed(labels):
        node = keccak(node + labelhash(label))
    return node


def reverse_name(address: str) -> str:
    return f"{address.lower().removeprefix('0x')}.{REVERSE_SUFFIX}"


def reverse_node(address: str) -> bytes:
    return namehash(reverse_name(address))
