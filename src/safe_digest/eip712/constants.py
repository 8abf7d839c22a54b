"""
EIP-712 and Safe Constants

Type names, canonical domain field layout and the fixed ``SafeTx`` /
``SafeMessage`` type definitions used across the digest builder and the
Safe typed-data factory.
"""

from typing import Dict, List

# ---------------------------------------------------------------------------
# EIP-712
# ---------------------------------------------------------------------------

EIP712_DOMAIN_TYPE = "EIP712Domain"

#: ``\x19\x01`` prefix of every EIP-712 signable pre-image.
EIP712_PREFIX: bytes = b"\x19\x01"

#: Domain fields in the order EIP-712 mandates for the ``EIP712Domain`` type.
EIP712_DOMAIN_FIELDS: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
    {"name": "salt", "type": "bytes32"},
]

# ---------------------------------------------------------------------------
# Safe
# ---------------------------------------------------------------------------

SAFE_TX_PRIMARY_TYPE = "SafeTx"
SAFE_MESSAGE_PRIMARY_TYPE = "SafeMessage"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

BASE_GAS_FIELD = "baseGas"
DATA_GAS_FIELD = "dataGas"


def safe_tx_type_fields(gas_field_name: str = BASE_GAS_FIELD) -> List[Dict[str, str]]:
    """
    Return the ten ``SafeTx`` fields in their fixed order.

    Args:
        gas_field_name: ``baseGas`` for Safe >=1.0.0, ``dataGas`` before that.
    """
    return [
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
        {"name": "operation", "type": "uint8"},
        {"name": "safeTxGas", "type": "uint256"},
        {"name": gas_field_name, "type": "uint256"},
        {"name": "gasPrice", "type": "uint256"},
        {"name": "gasToken", "type": "address"},
        {"name": "refundReceiver", "type": "address"},
        {"name": "nonce", "type": "uint256"},
    ]


SAFE_MESSAGE_TYPE_FIELDS: List[Dict[str, str]] = [
    {"name": "message", "type": "bytes"},
]

# keccak256("EIP712Domain(address verifyingContract)")
DOMAIN_WITHOUT_CHAIN_ID_TYPEHASH = "0x035aff83d86937d35b32e04f0ddc6ff469290eef2f1b692d8a815c89404d4749"
# keccak256("EIP712Domain(uint256 chainId,address verifyingContract)")
DOMAIN_WITH_CHAIN_ID_TYPEHASH = "0x47e79534a245952e8b16893a336b85a3d9ea9fa8c573f3d803afb92a79469218"
# keccak256("SafeTx(address to,...,uint256 baseGas,...,uint256 nonce)")
SAFE_TX_TYPEHASH = "0xbb8310d486368db6bd6f849402fdd73ad53d316b5a4b2644ad6efe0f941286d8"
# keccak256("SafeTx(address to,...,uint256 dataGas,...,uint256 nonce)")
LEGACY_SAFE_TX_TYPEHASH = "0x14d461bc7412367e924637b363c7bf29b8f47e2f84869f4426e5633d8af47b20"
# keccak256("SafeMessage(bytes message)")
SAFE_MESSAGE_TYPEHASH = "0x60b3cbf8b4a223d68d641b3b6ddf9a298e7f33710cf3d3a9d1146b5a6150fbca"
