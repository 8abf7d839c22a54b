"""
EIP-712 Schema Models

Pydantic models for typed-data payloads, Safe transaction fields and the
results returned by the digest helpers. All classes inherit from the base
schema hierarchy in ``schemas.bases``.

Payload classes:
    - TypedDataField: One ``{name, type}`` entry of a struct definition.
    - EIP712TypedData: ``{domain, types, message, primaryType}`` envelope.
    - SafeTransactionData: The ten ``SafeTx`` fields as supplied by a caller.

Result classes:
    - DigestResult: Outcome of ``compute_typed_data_digest`` / ``compute_safe_digest``.
    - SafeTypedDataHashes: Domain separator and struct hash of a Safe payload.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from ..schemas.bases import BaseValidationResult, CanonicalModel
from .constants import EIP712_DOMAIN_TYPE

IntLike = Union[int, str]


class TypedDataField(CanonicalModel):
    """A single struct member, e.g. ``{"name": "to", "type": "address"}``."""

    name: str = Field(..., description="Field name")
    type: str = Field(..., description="ABI type, custom struct name or array of either")


class EIP712TypedData(CanonicalModel):
    """
    EIP-712 typed data envelope.

    ``primaryType`` may be omitted; ``resolved_primary_type()`` then picks the
    first declared struct other than ``EIP712Domain``. ``types`` may or may
    not declare ``EIP712Domain``; when absent it is derived from the domain.

    Attributes:
        domain: Domain values (name, version, chainId, verifyingContract, salt).
        types: Struct definitions keyed by type name, fields in declaration order.
        message: Values of the primary struct.
        primary_type: Name of the struct being signed (alias ``primaryType``).

    Example::

        typed_data = EIP712TypedData(
            domain={"name": "Ether Mail", "version": "1", "chainId": 1},
            types={"Person": [{"name": "name", "type": "string"}]},
            message={"name": "Bob"},
            primaryType="Person",
        )
        typed_data.to_dict()  # keys: domain, types, message, primaryType
    """

    domain: Dict[str, Any] = Field(default_factory=dict, description="EIP-712 domain values")
    types: Dict[str, List[TypedDataField]] = Field(..., description="Struct definitions")
    message: Dict[str, Any] = Field(default_factory=dict, description="Primary struct values")
    primary_type: Optional[str] = Field(None, alias="primaryType", description="Primary struct name")

    def resolved_primary_type(self) -> Optional[str]:
        if self.primary_type:
            return self.primary_type
        for name in self.types:
            if name != EIP712_DOMAIN_TYPE:
                return name
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Return a plain dict accepted by the digest helpers and by
        ``eth_account.messages.encode_typed_data(full_message=...)``.
        """
        data = self.model_dump(by_alias=True)
        data["primaryType"] = self.resolved_primary_type()
        return data


class Operation(IntEnum):
    """Safe transaction operation type."""
    CALL = 0
    DELEGATE_CALL = 1


class SafeTransactionData(CanonicalModel):
    """
    Safe multisig transaction fields.

    ``data`` defaults to ``0x`` and both refund addresses default to the zero
    address when left unset. ``safeTxGas``, ``baseGas`` and ``gasPrice`` have
    no default: building typed data with any of them unset fails with
    ``MissingFieldValue``.

    Attributes:
        to: Destination address.
        value: Wei amount.
        data: Call data as ``0x`` hex.
        operation: ``0`` (call) or ``1`` (delegatecall).
        safe_tx_gas: Gas forwarded to the inner call (alias ``safeTxGas``).
        base_gas: Gas independent of the inner call (alias ``baseGas``).
        gas_price: Refund gas price (alias ``gasPrice``).
        gas_token: Refund token, zero address for ETH (alias ``gasToken``).
        refund_receiver: Refund recipient (alias ``refundReceiver``).
        nonce: Safe nonce.
    """

    to: str = Field(..., description="Destination address")
    value: IntLike = Field(0, description="Wei amount")
    data: Optional[str] = Field(None, description="Call data (0x hex)")
    operation: IntLike = Field(int(Operation.CALL), description="0 = call, 1 = delegatecall")
    safe_tx_gas: Optional[IntLike] = Field(None, alias="safeTxGas")
    base_gas: Optional[IntLike] = Field(None, alias="baseGas")
    gas_price: Optional[IntLike] = Field(None, alias="gasPrice")
    gas_token: Optional[str] = Field(None, alias="gasToken")
    refund_receiver: Optional[str] = Field(None, alias="refundReceiver")
    nonce: IntLike = Field(..., description="Safe nonce")


class DigestResult(BaseValidationResult):
    """
    Digest computation outcome.

    Attributes:
        digest: 66-char ``0x`` hex digest on success, ``None`` on failure.
        primary_type: Primary type that was hashed (alias ``primaryType``).

    Example:
        result = compute_typed_data_digest(typed_data)
        if result.is_success():
            print(result.digest)
    """

    digest: Optional[str] = Field(None, description="0x-prefixed 32-byte digest")
    primary_type: Optional[str] = Field(None, alias="primaryType", description="Hashed primary type")


class SafeTypedDataHashes(CanonicalModel):
    """
    Domain separator and message struct hash of a Safe payload.

    Either value is ``None`` when it could not be computed.
    """

    domain_hash: Optional[str] = Field(None, alias="domainHash")
    message_hash: Optional[str] = Field(None, alias="messageHash")
