"""Minimal ABIs for the ENS contracts touched while naming a contract."""

OWNABLE_ABI = [
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ENS_REGISTRY_ABI = [
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "owner",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "resolver",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "recordExists",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "node", "type": "bytes32"},
            {"name": "label", "type": "bytes32"},
            {"name": "owner", "type": "address"},
            {"name": "resolver", "type": "address"},
            {"name": "ttl", "type": "uint64"},
        ],
        "name": "setSubnodeRecord",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

NAME_WRAPPER_ABI = [
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "isWrapped",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "parentNode", "type": "bytes32"},
            {"name": "label", "type": "string"},
            {"name": "owner", "type": "address"},
            {"name": "resolver", "type": "address"},
            {"name": "ttl", "type": "uint64"},
            {"name": "fuses", "type": "uint32"},
            {"name": "expiry", "type": "uint64"},
        ],
        "name": "setSubnodeRecord",
        "outputs": [{"name": "node", "type": "bytes32"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

PUBLIC_RESOLVER_ABI = [
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "addr",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "node", "type": "bytes32"},
            {"name": "coinType", "type": "uint256"},
        ],
        "name": "addr",
        "outputs": [{"name": "", "type": "bytes"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "node", "type": "bytes32"},
            {"name": "a", "type": "address"},
        ],
        "name": "setAddr",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "node", "type": "bytes32"},
            {"name": "coinType", "type": "uint256"},
            {"name": "a", "type": "bytes"},
        ],
        "name": "setAddr",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"name": "node", "type": "bytes32"}],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "node", "type": "bytes32"},
            {"name": "newName", "type": "string"},
        ],
        "name": "setName",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

REVERSE_REGISTRAR_ABI = [
    {
        "inputs": [
            {"name": "addr", "type": "address"},
            {"name": "owner", "type": "address"},
            {"name": "resolver", "type": "address"},
            {"name": "name", "type": "string"},
        ],
        "name": "setNameForAddr",
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

L2_REVERSE_REGISTRAR_ABI = [
    {
        "inputs": [
            {"name": "addr", "type": "address"},
            {"name": "name", "type": "string"},
        ],
        "name": "setNameForAddr",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

ADDR = "addr(bytes32)"
ADDR_FOR_COIN = "addr(bytes32,uint256)"
SET_ADDR = "setAddr(bytes32,address)"
SET_ADDR_FOR_COIN = "setAddr(bytes32,uint256,bytes)"
