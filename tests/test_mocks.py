"""
safe-digest Test Mocks Module

Shared constants, typed-data fixtures and signature builders for the test
suite. Everything here is deterministic: signature slots are assembled from
fixed byte patterns so that the codec tests never depend on real keys.

Key Components:
    - Well-known EIP-712 ``Mail`` example and its published hashes
    - Safe addresses, versions and ``SafeTx`` payload factories
    - Builders for EOA / eth_sign / approved-hash / contract signature slots
    - Reference digests computed independently with ``eth_account``

Usage:
    from test_mocks import (
        create_mail_typed_data,
        create_safe_tx_data,
        create_eoa_signature,
        reference_typed_data_digest,
    )
"""

import copy
from typing import Any, Dict, Optional

from eth_account.messages import encode_typed_data
from eth_utils import keccak
from web3 import Web3


# ========================================================================
# EIP-712 Reference Vectors (the "Mail" example from the EIP)
# ========================================================================

MAIL_VERIFYING_CONTRACT = "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"
MAIL_FROM_WALLET = "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"
MAIL_TO_WALLET = "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"

MAIL_ENCODED_TYPE = "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
MAIL_TYPE_HASH = "0xa0cedeb2dc280ba39b857546d74f5549c3a1d7bdc2dd96bf881f76108e23dac2"
MAIL_DOMAIN_SEPARATOR = "0xf2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f"
MAIL_STRUCT_HASH = "0xc52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e"
MAIL_DIGEST = "0xbe609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2"

MAIL_DOMAIN: Dict[str, Any] = {
    "name": "Ether Mail",
    "version": "1",
    "chainId": 1,
    "verifyingContract": MAIL_VERIFYING_CONTRACT,
}

MAIL_TYPES: Dict[str, Any] = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    "Person": [
        {"name": "name", "type": "string"},
        {"name": "wallet", "type": "address"},
    ],
    "Mail": [
        {"name": "from", "type": "Person"},
        {"name": "to", "type": "Person"},
        {"name": "contents", "type": "string"},
    ],
}

MAIL_MESSAGE: Dict[str, Any] = {
    "from": {"name": "Cow", "wallet": MAIL_FROM_WALLET},
    "to": {"name": "Bob", "wallet": MAIL_TO_WALLET},
    "contents": "Hello, Bob!",
}


def create_mail_typed_data(with_domain_type: bool = True, **overrides) -> Dict[str, Any]:
    """
    Return a fresh copy of the EIP-712 ``Mail`` example.

    Args:
        with_domain_type: Keep the explicit ``EIP712Domain`` entry in ``types``.
        **overrides: Top-level keys to replace (``domain``, ``message``, ...).
    """
    types = copy.deepcopy(MAIL_TYPES)
    if not with_domain_type:
        types.pop("EIP712Domain")
    typed_data = {
        "domain": copy.deepcopy(MAIL_DOMAIN),
        "types": types,
        "primaryType": "Mail",
        "message": copy.deepcopy(MAIL_MESSAGE),
    }
    typed_data.update(overrides)
    return typed_data


# ========================================================================
# Safe Constants
# ========================================================================

MOCK_SAFE_ADDRESS = Web3.to_checksum_address("0x" + "5a" * 20)
MOCK_RECIPIENT_ADDRESS = Web3.to_checksum_address("0x" + "7e" * 20)
MOCK_OWNER_ADDRESS = Web3.to_checksum_address("0x" + "0b" * 20)
MOCK_VERIFIER_ADDRESS = Web3.to_checksum_address("0x" + "c0" * 20)
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MOCK_CHAIN_ID_MAINNET = 1
MOCK_CHAIN_ID_SEPOLIA = 11155111

SAFE_VERSION_LEGACY = "0.1.0"
SAFE_VERSION_WITHOUT_CHAIN_ID = "1.2.0"
SAFE_VERSION_WITH_CHAIN_ID = "1.3.0"
SAFE_VERSION_L2 = "1.3.0+L2"
SAFE_VERSION_LATEST = "1.4.1"


def create_safe_tx_data(**overrides) -> Dict[str, Any]:
    """Return a camelCase ``SafeTx`` payload with every field populated."""
    data = {
        "to": MOCK_RECIPIENT_ADDRESS,
        "value": 10 ** 18,
        "data": "0xa9059cbb",
        "operation": 0,
        "safeTxGas": 50000,
        "baseGas": 21000,
        "gasPrice": 0,
        "gasToken": ZERO_ADDRESS,
        "refundReceiver": ZERO_ADDRESS,
        "nonce": 7,
    }
    data.update(overrides)
    return data


# ========================================================================
# Reference Digests
# ========================================================================

def reference_typed_data_digest(typed_data: Dict[str, Any]) -> str:
    """Digest of ``typed_data`` as computed by ``eth_account``."""
    signable = encode_typed_data(full_message=typed_data)
    return "0x" + keccak(b"\x19" + signable.version + signable.header + signable.body).hex()


def reference_eip191_hash(text: str) -> str:
    """``keccak256("\\x19Ethereum Signed Message:\\n" + len + text)`` done by hand."""
    payload = text.encode("utf-8")
    prefix = b"\x19Ethereum Signed Message:\n" + str(len(payload)).encode("ascii")
    return "0x" + keccak(prefix + payload).hex()


# ========================================================================
# Signature Builders
# ========================================================================

def _word(value: int) -> bytes:
    return value.to_bytes(32, "big")


def _address_word(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


def create_eoa_signature(seed: int = 1, v: int = 27) -> bytes:
    """65-byte ECDSA-shaped slot (r and s are fixed patterns, not a real signature)."""
    return bytes([seed % 256]) * 32 + bytes([(seed + 1) % 256]) * 32 + bytes([v])


def create_eth_sign_signature(seed: int = 3) -> bytes:
    return create_eoa_signature(seed, v=31)


def create_approved_hash_signature(owner: str = MOCK_OWNER_ADDRESS) -> bytes:
    return _address_word(owner) + bytes(32) + bytes([1])


def create_contract_slot(verifier: str = MOCK_VERIFIER_ADDRESS, offset: int = 0) -> bytes:
    """Static part of a contract signature: ``r = verifier, s = offset, v = 0``."""
    return _address_word(verifier) + _word(offset) + bytes([0])


def create_dynamic_part(payload: bytes, length: Optional[int] = None) -> bytes:
    """Length word followed by ``payload``; ``length`` overrides the declared size."""
    return _word(len(payload) if length is None else length) + payload


def to_hex(raw: bytes) -> str:
    return "0x" + raw.hex()


def create_mixed_blob(payload: Optional[bytes] = None) -> bytes:
    """
    Four slots (EOA, approved hash, eth_sign, contract) followed by the
    contract signature's dynamic part at offset 260.
    """
    payload = create_eoa_signature(9) if payload is None else payload
    static = (
        create_eoa_signature(1)
        + create_approved_hash_signature()
        + create_eth_sign_signature()
        + create_contract_slot(offset=4 * 65)
    )
    return static + create_dynamic_part(payload)
