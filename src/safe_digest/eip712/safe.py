"""
Safe Typed Data Factory

Version-aware assembly of the EIP-712 payloads signed by Safe owners:

* ``SafeTx`` for multisig transactions (any ``data`` carrying a ``to``);
* ``SafeMessage`` for off-chain messages, whose single ``bytes message``
  field holds the EIP-191 hash of a string or the EIP-712 digest of nested
  typed data.

The Safe version is parsed once; the resulting ``SafeVersion`` decides both
the domain shape (``chainId`` from 1.3.0 on) and the gas field name
(``dataGas`` before 1.0.0). No other code path looks at the version.

Exported helpers
----------------
build_safe_tx_typed_data / build_safe_message_typed_data / build_safe_typed_data
    Return ``SafeTxTypedData`` / ``SafeMessageTypedData`` envelopes.
get_safe_tx_hash / get_safe_message_hash
    Digest of the envelope; raise on bad input.
compute_safe_digest
    Result-returning digest that never raises for bad input.
get_safe_typed_data_hashes
    Domain separator and struct hash pair, ``None`` where not computable.
"""

from typing import Any, Dict, Mapping, Optional, Union

from eth_account.messages import defunct_hash_message
from eth_utils import encode_hex
from web3 import Web3

from ..exceptions import BaseError, InvalidFieldValue, MissingFieldValue
from ..schemas.bases import ValidationStatus
from ..schemas.versions import SafeVersion
from ..utils import logger
from .constants import (
    BASE_GAS_FIELD,
    DATA_GAS_FIELD,
    EIP712_DOMAIN_TYPE,
    ZERO_ADDRESS,
)
from .digests import hash_domain, hash_struct, hash_typed_data
from .schemas import DigestResult, EIP712TypedData, SafeTransactionData, SafeTypedDataHashes
from .standards import (
    SafeMessageMessage,
    SafeMessageTypedData,
    SafeTxMessage,
    SafeTxTypedData,
    build_safe_domain,
)

VersionInput = Union[str, SafeVersion]
SafeTypedData = Union[SafeTxTypedData, SafeMessageTypedData]

_SAFE_TX_KEYS = (
    "to", "value", "data", "operation", "safeTxGas",
    "baseGas", "gasPrice", "gasToken", "refundReceiver", "nonce",
)


def _parse_version(safe_version: VersionInput) -> SafeVersion:
    if isinstance(safe_version, SafeVersion):
        return safe_version
    return SafeVersion.from_string(safe_version)


def _checksum(address: Any, field_path: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise InvalidFieldValue(f"Invalid address {address!r}: {e}", field_path=field_path, type_name="address") from e


def is_safe_transaction_data(data: Any) -> bool:
    """Transaction payloads are recognised by a ``to`` key or attribute."""
    if isinstance(data, (str, bytes)):
        return False
    if isinstance(data, Mapping):
        return "to" in data
    return hasattr(data, "to")


def _transaction_fields(data: Any) -> Dict[str, Any]:
    if isinstance(data, SafeTransactionData):
        fields = data.model_dump(by_alias=True)
    elif isinstance(data, Mapping):
        fields = {key: data.get(key) for key in _SAFE_TX_KEYS}
        if fields["baseGas"] is None:
            fields["baseGas"] = data.get(DATA_GAS_FIELD)
    else:
        fields = {key: getattr(data, key, None) for key in _SAFE_TX_KEYS}
        if fields["baseGas"] is None:
            fields["baseGas"] = getattr(data, DATA_GAS_FIELD, None)
    return fields


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_safe_tx_typed_data(
    safe_address: str,
    safe_version: VersionInput,
    chain_id: int,
    data: Any,
) -> SafeTxTypedData:
    """
    Build ``SafeTx`` typed data for a multisig transaction.

    Args:
        safe_address: Safe proxy address (the ``verifyingContract``).
        safe_version: Safe contract version, e.g. ``"1.3.0+L2"``.
        chain_id: Chain id; only part of the domain from 1.3.0 on.
        data: ``SafeTransactionData``, a mapping with camelCase keys, or any
            object exposing the same attributes.

    Returns:
        ``SafeTxTypedData`` whose ``to_dict()`` is accepted by the digest
        helpers and by ``eth_account``.

    Raises:
        UnsupportedSafeVersion: ``safe_version`` is not a semantic version.
        MissingFieldValue: ``to``, ``value``, ``nonce``, ``safeTxGas``,
            ``baseGas`` or ``gasPrice`` is unset.
        InvalidFieldValue: The Safe address is not an address.

    Example::

        typed_data = build_safe_tx_typed_data(
            "0x1234...5678", "1.3.0", 1,
            {"to": "0x...", "value": 0, "data": "0x", "operation": 0,
             "safeTxGas": 0, "baseGas": 0, "gasPrice": 0, "nonce": 7},
        )
        typed_data.to_dict()["domain"]  # {"chainId": 1, "verifyingContract": "0x1234...5678"}
    """
    version = _parse_version(safe_version)
    domain = build_safe_domain(version, _checksum(safe_address, "domain.verifyingContract"), chain_id)

    fields = _transaction_fields(data)
    for key in ("to", "value", "nonce", "safeTxGas", "baseGas", "gasPrice"):
        if fields[key] is None:
            raise MissingFieldValue(f"Safe transaction is missing {key!r}", field_path=f"message.{key}")

    message = SafeTxMessage(
        to=fields["to"],
        value=fields["value"],
        data=fields["data"] if fields["data"] is not None else "0x",
        operation=fields["operation"] if fields["operation"] is not None else 0,
        safeTxGas=fields["safeTxGas"],
        baseGas=fields["baseGas"],
        gasPrice=fields["gasPrice"],
        gasToken=fields["gasToken"] or ZERO_ADDRESS,
        refundReceiver=fields["refundReceiver"] or ZERO_ADDRESS,
        nonce=fields["nonce"],
        gas_field_name=BASE_GAS_FIELD if version.uses_base_gas else DATA_GAS_FIELD,
    )
    return SafeTxTypedData(domain=domain, message=message)


def _message_hash(message: Any) -> str:
    if isinstance(message, str):
        return encode_hex(defunct_hash_message(text=message))
    if isinstance(message, (EIP712TypedData, Mapping)):
        return hash_typed_data(message)
    raise InvalidFieldValue(
        f"Safe message must be a string or EIP-712 typed data, got {type(message).__name__}",
        field_path="message",
    )


def build_safe_message_typed_data(
    safe_address: str,
    safe_version: VersionInput,
    chain_id: int,
    message: Any,
) -> SafeMessageTypedData:
    """
    Build ``SafeMessage`` typed data for an off-chain message.

    A plain string is hashed with EIP-191 (``hashMessage``); typed data
    (``EIP712TypedData`` or a ``{domain, types, message}`` mapping) is reduced
    to its own EIP-712 digest first.
    """
    version = _parse_version(safe_version)
    domain = build_safe_domain(version, _checksum(safe_address, "domain.verifyingContract"), chain_id)
    return SafeMessageTypedData(domain=domain, message=SafeMessageMessage(message=_message_hash(message)))


def build_safe_typed_data(
    safe_address: str,
    safe_version: VersionInput,
    chain_id: int,
    data: Any,
) -> SafeTypedData:
    """Dispatch to the ``SafeTx`` or ``SafeMessage`` builder based on ``data``."""
    if is_safe_transaction_data(data):
        return build_safe_tx_typed_data(safe_address, safe_version, chain_id, data)
    return build_safe_message_typed_data(safe_address, safe_version, chain_id, data)


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------

def get_safe_tx_hash(safe_address: str, safe_version: VersionInput, chain_id: int, data: Any) -> str:
    """Return the ``safeTxHash`` owners sign for a transaction."""
    typed_data = build_safe_tx_typed_data(safe_address, safe_version, chain_id, data)
    return hash_typed_data(typed_data.to_dict())


def get_safe_message_hash(safe_address: str, safe_version: VersionInput, chain_id: int, message: Any) -> str:
    """Return the ``safeMessageHash`` owners sign for an off-chain message."""
    typed_data = build_safe_message_typed_data(safe_address, safe_version, chain_id, message)
    return hash_typed_data(typed_data.to_dict())


def compute_safe_digest(
    safe_address: str,
    safe_version: VersionInput,
    chain_id: int,
    data: Any,
) -> DigestResult:
    """
    Result-returning digest of a Safe transaction or message.

    Returns:
        DigestResult with the digest and ``primaryType`` (``SafeTx`` or
        ``SafeMessage``) on success; the failing status otherwise (including
        ``UNSUPPORTED_SAFE_VERSION``).
    """
    try:
        typed_data = build_safe_typed_data(safe_address, safe_version, chain_id, data)
        digest = hash_typed_data(typed_data.to_dict())
    except BaseError as e:
        logger.debug("Safe digest rejected for %s: %s", safe_address, e.message)
        return DigestResult(
            status=ValidationStatus.from_code(e.code),
            is_valid=False,
            message=e.message,
            error_details=e.to_details(),
        )

    return DigestResult(
        status=ValidationStatus.SUCCESS,
        is_valid=True,
        message="Digest computed",
        digest=digest,
        primary_type=typed_data.primary_type,
    )


def get_safe_typed_data_hashes(
    safe_address: str,
    safe_version: VersionInput,
    chain_id: int,
    data: Any,
) -> SafeTypedDataHashes:
    """
    Return the domain separator and the ``SafeTx`` / ``SafeMessage`` struct hash.

    Failures are logged as warnings and leave the affected hash ``None``; a
    payload that cannot be assembled at all yields two ``None`` values.
    """
    try:
        typed_data = build_safe_typed_data(safe_address, safe_version, chain_id, data)
    except BaseError as e:
        logger.warning("Unable to build Safe typed data for %s: %s", safe_address, e.message)
        return SafeTypedDataHashes()

    payload = typed_data.to_dict()
    types = payload["types"]

    domain_hash: Optional[str] = None
    try:
        domain_hash = hash_domain(payload["domain"], types)
    except BaseError as e:
        logger.warning("Unable to hash Safe domain for %s: %s", safe_address, e.message)

    message_hash: Optional[str] = None
    primary_type = payload["primaryType"]
    struct_types = {name: fields for name, fields in types.items() if name != EIP712_DOMAIN_TYPE}
    try:
        message_hash = hash_struct(primary_type, payload["message"], struct_types)
    except BaseError as e:
        logger.warning("Unable to hash %s message for %s: %s", primary_type, safe_address, e.message)

    return SafeTypedDataHashes(domain_hash=domain_hash, message_hash=message_hash)
